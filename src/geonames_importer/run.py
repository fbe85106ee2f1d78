import logging

import click

from .cli import import_cli
from .log_utils import configure_structlog

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="INFO", help="日志级别")
def main(log_level):
    """GeonamesImporter - GeoNames 国家和城市数据导入工具。"""
    configure_structlog(log_level=getattr(logging, log_level))


main.add_command(import_cli, name="import")


def run_entry():
    """程序入口点。"""
    main()
