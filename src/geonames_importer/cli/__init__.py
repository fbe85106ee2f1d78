"""CLI 模块 - 命令行接口。"""

from .import_cli import import_cli

__all__ = [
    "import_cli",
]
