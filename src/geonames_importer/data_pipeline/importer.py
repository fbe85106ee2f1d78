"""导入器 - 下载、解压、解析、验证并分发 GeoNames 记录。"""

from contextlib import closing
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .consumer import as_record_handler
from .downloader import DataDownloader
from .extractor import ArchiveExtractor
from .reader import read_rows
from .source import (
    COUNTRY_INFO_URL,
    GEONAMES_DUMP_URL,
    ImportSource,
    ImportSummary,
    WorkArea,
    city_source,
    country_source,
)
from .validator import DiscoveredSchemaValidator, RowValidator, create_validator

logger = structlog.get_logger()


class GeonamesImporter:
    """GeoNames 数据导入器，每次 process() 完整运行一次导入流程。"""

    def __init__(
        self,
        source: ImportSource,
        download_dir: Union[str, Path],
        consumer: Any,
        downloader: Optional[DataDownloader] = None,
        extractor: Optional[ArchiveExtractor] = None,
    ):
        """初始化导入器。

        Args:
            source: 数据源描述
            download_dir: 临时文件目录，必须已存在
            consumer: 记录消费者，可调用对象或实现 accept 方法的对象
            downloader: 下载器，默认新建
            extractor: 解压器，默认新建

        Raises:
            ValueError: 目录不存在或消费者无效
        """
        if not isinstance(download_dir, (str, Path)) or not Path(download_dir).is_dir():
            raise ValueError(f"目录不存在: {download_dir}")

        self.source = source
        self.download_dir = Path(download_dir)
        self.handler = as_record_handler(consumer)
        self.downloader = downloader or DataDownloader()
        self.extractor = extractor or ArchiveExtractor()

    def process(self) -> ImportSummary:
        """运行导入流程。

        下载或解压失败时提前结束，临时文件在任何情况下都会被删除。
        消费者抛出的异常在清理后继续向上抛出。

        Returns:
            导入结果
        """
        logger.info("开始导入", source=self.source.name, url=self.source.url)

        with WorkArea(self.download_dir, self.source) as work_area:
            if not self.downloader.fetch(self.source.url, work_area.download_path):
                logger.error("下载出错，导入终止", source=self.source.name)
                return self._failed("download")

            if self.source.is_archive:
                if not self.extractor.extract(
                    work_area.download_path, self.source.archive_member, work_area.extract_dir
                ):
                    logger.error("解压出错，导入终止", source=self.source.name)
                    return self._failed("extract")

            validator = create_validator(self.source)
            self._parse_file(work_area.data_path, validator)

        return ImportSummary(
            source=self.source.name,
            success=True,
            records=validator.admitted,
            dropped=validator.dropped,
            columns=validator.columns,
        )

    def _parse_file(self, path: Path, validator: RowValidator):
        """解析文件，把每条有效记录交给消费者。"""
        logger.info("开始解析文件", file=str(path))

        rows = read_rows(
            path,
            separator=self.source.separator,
            quote_char=self.source.quote_char,
            escape_char=self.source.escape_char,
        )
        with closing(rows):
            for row in rows:
                record = validator.validate(row)
                if record is not None:
                    self.handler(record)

        if isinstance(validator, DiscoveredSchemaValidator) and not validator.has_schema:
            logger.warning("文件中没有找到列定义", file=str(path))

        logger.info("解析完成", file=str(path), records=validator.admitted, dropped=validator.dropped)

    def _failed(self, stage: str) -> ImportSummary:
        return ImportSummary(source=self.source.name, success=False, failed_stage=stage)


class CountryImporter(GeonamesImporter):
    """国家数据导入器，数据来自 countryInfo.txt。

    使用示例::

        importer = CountryImporter("/tmp", lambda country: print(country["ISO"]))
        importer.process()
    """

    def __init__(self, download_dir: Union[str, Path], consumer: Any, url: str = COUNTRY_INFO_URL, **kwargs):
        super().__init__(country_source(url), download_dir, consumer, **kwargs)


class CityImporter(GeonamesImporter):
    """城市数据导入器。

    压缩包列表见 http://download.geonames.org/export/dump/ ，
    例如 cities15000.zip、RU.zip。
    """

    def __init__(
        self,
        download_dir: Union[str, Path],
        archive_name: str,
        consumer: Any,
        base_url: str = GEONAMES_DUMP_URL,
        **kwargs,
    ):
        super().__init__(city_source(archive_name, base_url), download_dir, consumer, **kwargs)
