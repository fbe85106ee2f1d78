"""测试数据源定义和临时工作区。"""

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from geonames_importer.data_pipeline.source import (
    CITY_COLUMNS,
    COUNTRY_INFO_URL,
    GEONAMES_DUMP_URL,
    ImportSource,
    ImportSummary,
    WorkArea,
    city_source,
    country_source,
)


class TestImportSource:
    """测试 ImportSource 模型。"""

    def test_defaults(self):
        """测试默认的分隔符、引号和转义字符。"""
        source = ImportSource(name="test", url="http://example.com/data.txt")

        assert source.separator == "\t"
        assert source.quote_char == '"'
        assert source.escape_char == "\\"
        assert source.expected_columns == 19
        assert source.columns is None
        assert source.is_archive is False
        assert source.download_suffix == ".csv"

    def test_frozen(self):
        """测试构造后不可修改。"""
        source = country_source()
        with pytest.raises(ValidationError):
            source.url = "http://example.com/other.txt"

    @pytest.mark.parametrize("field", ["separator", "quote_char", "escape_char"])
    def test_single_char_required(self, field):
        """测试分隔符等必须是单个字符。"""
        with pytest.raises(ValueError):
            ImportSource(name="test", url="http://example.com", **{field: "ab"})

    def test_blank_url(self):
        """测试下载地址为空。"""
        with pytest.raises(ValueError):
            ImportSource(name="test", url="  ")

    def test_columns_count_mismatch(self):
        """测试列定义数量与预期列数不一致。"""
        with pytest.raises(ValueError, match="列定义数量"):
            ImportSource(name="test", url="http://example.com", columns=("a", "b"))

    def test_duplicate_columns(self):
        """测试重复列名。"""
        with pytest.raises(ValueError, match="列名不能重复"):
            ImportSource(name="test", url="http://example.com", expected_columns=2, columns=("a", "a"))

    def test_empty_column_name(self):
        """测试空列名。"""
        with pytest.raises(ValueError, match="列名不能为空"):
            ImportSource(name="test", url="http://example.com", expected_columns=2, columns=("a", ""))


class TestSourceFactories:
    """测试国家和城市数据源。"""

    def test_country_source(self):
        """测试国家数据源。"""
        source = country_source()

        assert source.name == "country"
        assert source.url == COUNTRY_INFO_URL
        assert source.archive_member is None
        assert source.columns is None

    def test_city_source(self):
        """测试城市数据源的下载地址和压缩包内文件名。"""
        source = city_source("cities15000.zip")

        assert source.name == "city"
        assert source.url == GEONAMES_DUMP_URL + "cities15000.zip"
        assert source.archive_member == "cities15000.txt"
        assert source.columns == CITY_COLUMNS
        assert source.is_archive is True
        assert source.download_suffix == ".zip"

    def test_city_source_custom_base_url(self):
        """测试自定义导出目录。"""
        source = city_source("RU.zip", base_url="http://mirror.example.com/dump/")
        assert source.url == "http://mirror.example.com/dump/RU.zip"
        assert source.archive_member == "RU.txt"

    @pytest.mark.parametrize("archive_name", ["", "   ", None, 123])
    def test_city_source_invalid_archive(self, archive_name):
        """测试压缩包名称无效。"""
        with pytest.raises(ValueError, match="请指定压缩包名称"):
            city_source(archive_name)

    def test_city_columns(self):
        """测试城市数据列定义。"""
        assert len(CITY_COLUMNS) == 19
        assert CITY_COLUMNS[0] == "geonameid"
        assert CITY_COLUMNS[-1] == "modification_date"


class TestImportSummary:
    """测试 ImportSummary 模型。"""

    def test_failed_summary_defaults(self):
        """测试失败结果的默认值。"""
        summary = ImportSummary(source="city", success=False, failed_stage="download")

        assert summary.records == 0
        assert summary.dropped == 0
        assert summary.columns == ()


class TestWorkArea:
    """测试 WorkArea 类。"""

    def test_plain_file_paths(self, temp_dir: Path):
        """测试纯文本数据源的路径。"""
        area = WorkArea(temp_dir, country_source())

        assert area.download_path.parent == temp_dir
        assert area.download_path.suffix == ".csv"
        assert area.extracted_path is None
        assert area.data_path == area.download_path

    def test_archive_paths(self, temp_dir: Path):
        """测试压缩包数据源的路径。"""
        area = WorkArea(temp_dir, city_source("RU.zip"))

        assert area.download_path.suffix == ".zip"
        assert area.extracted_path == temp_dir / area.token / "RU.txt"
        assert area.data_path == area.extracted_path

    def test_paths_do_not_collide(self, temp_dir: Path):
        """测试同时创建的工作区路径不同。"""
        areas = [WorkArea(temp_dir, city_source("RU.zip")) for _ in range(50)]

        assert len({area.download_path for area in areas}) == 50
        assert len({area.extract_dir for area in areas}) == 50

    def test_nothing_created_on_init(self, temp_dir: Path):
        """测试创建工作区时不写入任何文件。"""
        WorkArea(temp_dir, city_source("RU.zip"))
        assert list(temp_dir.iterdir()) == []

    def test_cleanup_removes_everything(self, temp_dir: Path):
        """测试清理下载文件、解压文件和解压目录。"""
        area = WorkArea(temp_dir, city_source("RU.zip"))
        area.download_path.write_bytes(b"zip")
        area.extract_dir.mkdir()
        area.extracted_path.write_text("data")
        (area.extract_dir / "leftover.tmp").write_text("partial")

        area.cleanup()

        assert list(temp_dir.iterdir()) == []

    def test_cleanup_is_idempotent(self, temp_dir: Path):
        """测试重复清理不会出错。"""
        area = WorkArea(temp_dir, country_source())
        area.download_path.write_bytes(b"data")

        area.cleanup()
        area.cleanup()

        assert list(temp_dir.iterdir()) == []

    def test_cleanup_leaves_other_files(self, temp_dir: Path):
        """测试不删除其它文件。"""
        other = temp_dir / "keep.txt"
        other.write_text("keep")

        with WorkArea(temp_dir, country_source()) as area:
            area.download_path.write_bytes(b"data")

        assert list(temp_dir.iterdir()) == [other]

    def test_context_manager_cleans_up_on_error(self, temp_dir: Path):
        """测试发生异常时也会清理。"""
        with pytest.raises(RuntimeError):
            with WorkArea(temp_dir, country_source()) as area:
                area.download_path.write_bytes(b"data")
                raise RuntimeError("boom")

        assert list(temp_dir.iterdir()) == []

    def test_cleanup_error_does_not_mask_original_error(self, temp_dir: Path):
        """测试清理失败时保留 with 块内的原异常。"""
        with patch("geonames_importer.data_pipeline.source.shutil.rmtree", side_effect=OSError("busy")):
            with patch("geonames_importer.data_pipeline.source.logger") as mock_logger:
                with pytest.raises(RuntimeError, match="consumer failed"):
                    with WorkArea(temp_dir, city_source("cities15000.zip")) as area:
                        area.extract_dir.mkdir()
                        raise RuntimeError("consumer failed")

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["error"] == "busy"

    def test_cleanup_error_raised_without_original_error(self, temp_dir: Path):
        """测试没有其他异常时清理失败会抛出。"""
        with patch("geonames_importer.data_pipeline.source.shutil.rmtree", side_effect=OSError("busy")):
            with pytest.raises(OSError, match="busy"):
                with WorkArea(temp_dir, city_source("cities15000.zip")) as area:
                    area.extract_dir.mkdir()
