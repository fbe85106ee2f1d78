"""测试配置和通用 fixtures。"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator, List
from unittest.mock import patch

import pytest

from fixtures.geonames_data import COUNTRY_HEADER, city_fields, country_fields, tsv_text
from geonames_importer.log_utils import configure_structlog


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """配置测试日志。"""
    configure_structlog(log_level=30)  # WARNING level for tests


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """创建临时目录。"""
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def download_dir(temp_dir: Path) -> Path:
    """导入使用的临时文件目录。"""
    path = temp_dir / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def mock_get():
    """模拟 requests.get。"""
    with patch("geonames_importer.data_pipeline.downloader.requests.get") as mocked:
        yield mocked


@pytest.fixture
def city_tsv() -> str:
    """城市 TSV 内容：两行有效数据和一行缺列的数据。"""
    return tsv_text([
        city_fields(),
        city_fields()[:18],
        city_fields(geonameid="3039163", name="Sant Julià de Lòria"),
    ])


@pytest.fixture
def country_tsv() -> str:
    """国家 TSV 内容：注释行、列定义和两行数据。"""
    return "# GeoNames country info\n# CountryCodes:\n" + tsv_text([
        COUNTRY_HEADER,
        country_fields("AD", "Andorra"),
        country_fields("AE", "United Arab Emirates"),
    ])


@pytest.fixture
def records() -> List[dict]:
    """记录收集列表，append 作为消费者。"""
    return []
