"""数据管道模块 - 负责数据下载、解压、解析和验证。"""

from .consumer import RecordCollector, RecordConsumer
from .downloader import DataDownloader
from .extractor import ArchiveExtractor
from .importer import CityImporter, CountryImporter, GeonamesImporter
from .reader import read_rows
from .source import ImportSource, ImportSummary, WorkArea, city_source, country_source
from .validator import DiscoveredSchemaValidator, FixedSchemaValidator, create_validator

__all__ = [
    "ArchiveExtractor",
    "CityImporter",
    "CountryImporter",
    "DataDownloader",
    "DiscoveredSchemaValidator",
    "FixedSchemaValidator",
    "GeonamesImporter",
    "ImportSource",
    "ImportSummary",
    "RecordCollector",
    "RecordConsumer",
    "WorkArea",
    "city_source",
    "country_source",
    "create_validator",
    "read_rows",
]
