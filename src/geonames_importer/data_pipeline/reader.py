"""分隔文本读取器 - 逐行解析 TSV 文件。"""

import csv
import re
from pathlib import Path
from typing import Iterator, List, Union

import structlog

logger = structlog.get_logger()

# 解析前用私有区字符替换，解析后还原
_CR_MARK = "\ue000"
_ESCAPED_QUOTE_MARK = "\ue001"


def _protect(line: str, quote_char: str, escape_char: str) -> dict:
    """替换 csv 模块会特殊处理的字符序列，返回标记到原文的映射。"""
    marks = {}
    if "\r" in line and _CR_MARK not in line:
        marks[_CR_MARK] = "\r"
    escaped_quote = escape_char + quote_char
    if escape_char and escaped_quote in line and _ESCAPED_QUOTE_MARK not in line:
        marks[_ESCAPED_QUOTE_MARK] = escaped_quote
    return marks


def parse_line(line: str, separator: str = "\t", quote_char: str = '"', escape_char: str = "\\") -> List[str]:
    """把一行文本解析成字段列表，无法解析时返回空列表。

    转义字符按原样保留，不会转义分隔符；只有在引号内，
    转义字符后面的引号不结束字段。
    """
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]

    marks = _protect(line, quote_char, escape_char)
    if _CR_MARK in marks:
        line = line.replace("\r", _CR_MARK)
    if _ESCAPED_QUOTE_MARK in marks:
        # 成对匹配，转义字符本身被转义时后面的引号照常生效
        pattern = re.compile(re.escape(escape_char) + "(.)", re.DOTALL)
        line = pattern.sub(
            lambda m: _ESCAPED_QUOTE_MARK if m.group(1) == quote_char else m.group(0), line
        )

    try:
        reader = csv.reader([line], delimiter=separator, quotechar=quote_char, escapechar=None)
        fields = next(reader, [])
    except csv.Error as e:
        logger.debug("无法解析的行", error=str(e))
        return []

    for mark, original in marks.items():
        fields = [field.replace(mark, original) for field in fields]
    return fields


def read_rows(
    path: Union[str, Path],
    separator: str = "\t",
    quote_char: str = '"',
    escape_char: str = "\\",
) -> Iterator[List[str]]:
    """逐行读取文件，产出原始字段列表。

    只按 \\n 分行，字段内的 \\r 保留。内存占用只与单行大小有关。
    生成器耗尽或被 close() 时释放文件句柄。

    Args:
        path: 文件路径
        separator: 字段分隔符
        quote_char: 引号字符
        escape_char: 转义字符

    Yields:
        每行的字段列表
    """
    replaced = False
    with open(path, "rb") as fh:
        for line_number, raw in enumerate(fh, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                line = raw.decode("utf-8", errors="replace")
                if not replaced:
                    logger.warning("文件包含无效的 UTF-8 字节，已替换", file=str(path), line=line_number, error=str(e))
                    replaced = True
            yield parse_line(line, separator, quote_char, escape_char)
