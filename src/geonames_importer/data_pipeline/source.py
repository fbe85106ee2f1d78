"""导入源定义 - 数据集描述、临时工作区和导入结果。"""

import shutil
import uuid
from pathlib import Path
from typing import Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

logger = structlog.get_logger()

# GeoNames 导出目录
GEONAMES_DUMP_URL = "http://download.geonames.org/export/dump/"
COUNTRY_INFO_URL = GEONAMES_DUMP_URL + "countryInfo.txt"

# 两个数据集的列数相同
COLUMNS_COUNT = 19

CITY_COLUMNS: Tuple[str, ...] = (
    "geonameid",
    "name",
    "asciiname",
    "alternatenames",
    "latitude",
    "longitude",
    "feature_class",
    "feature_code",
    "country_code",
    "cc2",
    "admin1_code",
    "admin2_code",
    "admin3_code",
    "admin4_code",
    "population",
    "elevation",
    "dem",
    "timezone",
    "modification_date",
)


class ImportSource(BaseModel):
    """一次导入的数据源描述，构造后不可修改。"""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    archive_member: Optional[str] = None
    separator: str = "\t"
    quote_char: str = '"'
    escape_char: str = "\\"
    expected_columns: int = COLUMNS_COUNT
    # None 表示从文件中动态发现列定义
    columns: Optional[Tuple[str, ...]] = None

    @field_validator("separator", "quote_char", "escape_char")
    @classmethod
    def _single_char(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"必须是单个字符: {value!r}")
        return value

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("下载地址不能为空")
        return value

    @field_validator("archive_member")
    @classmethod
    def _member_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("压缩包内文件名不能为空")
        return value

    @model_validator(mode="after")
    def _check_columns(self) -> "ImportSource":
        if self.expected_columns <= 0:
            raise ValueError("列数必须为正数")
        if self.columns is not None:
            if any(not column for column in self.columns):
                raise ValueError("列名不能为空")
            if len(set(self.columns)) != len(self.columns):
                raise ValueError("列名不能重复")
            if len(self.columns) != self.expected_columns:
                raise ValueError(
                    f"列定义数量 {len(self.columns)} 与预期列数 {self.expected_columns} 不一致"
                )
        return self

    @property
    def is_archive(self) -> bool:
        return self.archive_member is not None

    @property
    def download_suffix(self) -> str:
        return ".zip" if self.is_archive else ".csv"


class ImportSummary(BaseModel):
    """一次导入运行的结果。"""

    model_config = ConfigDict(frozen=True)

    source: str
    success: bool
    failed_stage: Optional[str] = None
    records: int = 0
    dropped: int = 0
    columns: Tuple[str, ...] = ()


def country_source(url: str = COUNTRY_INFO_URL) -> ImportSource:
    """国家数据集：纯 TSV 文件，列定义从文件中发现。"""
    return ImportSource(name="country", url=url)


def city_source(archive_name: str, base_url: str = GEONAMES_DUMP_URL) -> ImportSource:
    """城市数据集：zip 压缩包，列定义固定。

    Args:
        archive_name: 压缩包名称，例如 cities15000.zip、RU.zip
        base_url: 导出目录地址

    Returns:
        城市数据源描述
    """
    if not isinstance(archive_name, str) or not archive_name.strip():
        raise ValueError("请指定压缩包名称")

    archive_name = archive_name.strip()
    return ImportSource(
        name="city",
        url=base_url + archive_name,
        archive_member=Path(archive_name).stem + ".txt",
        columns=CITY_COLUMNS,
    )


class WorkArea:
    """单次导入独占的临时文件集合。

    路径由随机 token 生成，同一目录下并发运行的导入互不冲突。
    退出 with 块时无论成功与否都会清理全部临时文件。
    """

    def __init__(self, root_dir: Path, source: ImportSource):
        self.root_dir = Path(root_dir)
        self.token = uuid.uuid4().hex
        self.download_path = self.root_dir / f"{self.token}{source.download_suffix}"
        self.extract_dir = self.root_dir / self.token
        self.extracted_path: Optional[Path] = None
        if source.archive_member is not None:
            self.extracted_path = self.extract_dir / Path(source.archive_member).name

    @property
    def data_path(self) -> Path:
        """需要解析的本地文件。"""
        return self.extracted_path if self.extracted_path is not None else self.download_path

    def cleanup(self):
        """删除下载文件、解压文件和解压目录，可重复调用。"""
        self.download_path.unlink(missing_ok=True)
        if self.extracted_path is not None:
            self.extracted_path.unlink(missing_ok=True)
        if self.extract_dir.is_dir():
            shutil.rmtree(self.extract_dir)
        logger.info("临时文件已删除", token=self.token)

    def __enter__(self) -> "WorkArea":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            self.cleanup()
        except OSError as e:
            logger.error("删除临时文件失败", token=self.token, error=str(e))
            # 已有异常时保留原异常
            if exc_type is None:
                raise
        return False
