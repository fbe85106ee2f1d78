"""数据导入 CLI 命令。"""

import json
import tempfile
from pathlib import Path

import click
import structlog

from ..data_pipeline import CityImporter, CountryImporter, DataDownloader, RecordCollector
from ..data_pipeline.downloader import DEFAULT_TIMEOUT
from ..data_pipeline.source import COUNTRY_INFO_URL, GEONAMES_DUMP_URL

logger = structlog.get_logger()


def _report(summary, collector: RecordCollector, output_file, preview: int):
    """显示导入结果并导出记录。"""
    if not summary.success:
        click.echo(f"✗ 导入失败 ({summary.failed_stage})", err=True)
        return

    click.echo(f"✓ 导入完成: {summary.records} 条记录，丢弃 {summary.dropped} 行")
    if not summary.columns:
        click.echo("⚠️  文件中没有找到列定义", err=True)

    for record in collector.records[:preview]:
        click.echo(json.dumps(record, ensure_ascii=False))

    if output_file:
        collector.to_frame().to_csv(output_file, index=False)
        click.echo(f"记录已保存至: {output_file}")


@click.group()
def import_cli():
    """GeoNames 数据导入命令。"""
    pass


@import_cli.command("country")
@click.option("--tmp-dir", "tmp_dir", default=tempfile.gettempdir(), help="临时文件目录")
@click.option("--url", default=COUNTRY_INFO_URL, help="countryInfo.txt 下载地址")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, help="下载超时（秒）")
@click.option("--output", "output_file", help="导出 CSV 文件路径")
@click.option("--preview", type=int, default=0, help="显示前 N 条记录")
def import_country(tmp_dir, url, timeout, output_file, preview):
    """导入国家数据。"""
    try:
        collector = RecordCollector()
        importer = CountryImporter(
            tmp_dir, collector, url=url, downloader=DataDownloader(timeout=timeout)
        )

        click.echo(f"从 {url} 导入国家数据...")
        summary = importer.process()
        _report(summary, collector, output_file, preview)

    except Exception as e:
        logger.error("国家数据导入失败", error=str(e))
        click.echo(f"错误: {str(e)}", err=True)


@import_cli.command("city")
@click.option("--archive", "archive_name", required=True, help="压缩包名称，例如 cities15000.zip")
@click.option("--tmp-dir", "tmp_dir", default=tempfile.gettempdir(), help="临时文件目录")
@click.option("--base-url", default=GEONAMES_DUMP_URL, help="GeoNames 导出目录地址")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, help="下载超时（秒）")
@click.option("--output", "output_file", help="导出 CSV 文件路径")
@click.option("--preview", type=int, default=0, help="显示前 N 条记录")
def import_city(archive_name, tmp_dir, base_url, timeout, output_file, preview):
    """导入城市数据。"""
    try:
        collector = RecordCollector()
        importer = CityImporter(
            tmp_dir,
            archive_name,
            collector,
            base_url=base_url,
            downloader=DataDownloader(timeout=timeout),
        )

        click.echo(f"从 {importer.source.url} 导入城市数据...")
        summary = importer.process()
        _report(summary, collector, output_file, preview)

    except Exception as e:
        logger.error("城市数据导入失败", error=str(e))
        click.echo(f"错误: {str(e)}", err=True)
