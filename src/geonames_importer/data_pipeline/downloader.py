"""数据下载器 - 通过 HTTP 下载 GeoNames 数据文件。"""

from pathlib import Path
from typing import Union

import requests
import structlog

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 60  # 秒
DEFAULT_CHUNK_SIZE = 64 * 1024


class DataDownloader:
    """数据下载器，单次 GET 请求，响应体流式写入本地文件。"""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """初始化下载器。

        Args:
            timeout: 连接和读取超时（秒）
            chunk_size: 每次写入的字节数
        """
        self.timeout = timeout
        self.chunk_size = chunk_size

    def fetch(self, url: str, destination: Union[str, Path]) -> bool:
        """下载文件到指定路径。

        网络错误、非成功状态码、写入失败以及输出文件为空都视为失败。

        Args:
            url: 下载地址
            destination: 本地文件路径，已存在时覆盖

        Returns:
            下载是否成功
        """
        destination = Path(destination)
        logger.info("开始下载文件", url=url, file=str(destination))

        try:
            response = requests.get(url, stream=True, timeout=self.timeout, allow_redirects=True)
            try:
                response.raise_for_status()
                with open(destination, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            fh.write(chunk)
            finally:
                response.close()
        except requests.RequestException as e:
            logger.error("下载失败", url=url, error=str(e))
            return False
        except OSError as e:
            logger.error("写入下载文件失败", file=str(destination), error=str(e))
            return False

        if not destination.is_file() or destination.stat().st_size == 0:
            logger.error("下载文件为空", url=url, file=str(destination))
            return False

        logger.info("下载完成", url=url, size=destination.stat().st_size)
        return True
