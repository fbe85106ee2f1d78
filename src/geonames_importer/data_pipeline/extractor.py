"""压缩包解压器 - 从 zip 压缩包中取出指定文件。"""

import shutil
import zipfile
from pathlib import Path
from typing import Union

import structlog

logger = structlog.get_logger()


class ArchiveExtractor:
    """从 zip 压缩包中解压单个文件。"""

    def extract(
        self,
        archive_path: Union[str, Path],
        member_name: str,
        destination_dir: Union[str, Path],
    ) -> bool:
        """解压指定文件到目标目录。

        只按文件名精确匹配，输出文件使用压缩包内文件的基本名称，
        不会把压缩包内的目录结构拼接到目标目录上。

        Args:
            archive_path: zip 文件路径
            member_name: 压缩包内的文件名
            destination_dir: 目标目录，不存在时自动创建

        Returns:
            解压是否成功
        """
        destination_dir = Path(destination_dir)
        target = destination_dir / Path(member_name).name

        try:
            with zipfile.ZipFile(archive_path) as archive:
                try:
                    info = archive.getinfo(member_name)
                except KeyError:
                    logger.error("压缩包中没有找到文件", archive=str(archive_path), member=member_name)
                    return False

                destination_dir.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
        except zipfile.BadZipFile as e:
            logger.error("无法打开压缩包", archive=str(archive_path), error=str(e))
            return False
        except OSError as e:
            logger.error("解压失败", archive=str(archive_path), member=member_name, error=str(e))
            return False

        if not target.is_file():
            logger.error("解压后文件不存在", file=str(target))
            return False

        logger.info("解压完成", member=member_name, file=str(target))
        return True
