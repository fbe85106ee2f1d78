"""行验证器 - 确定列定义并检查每行的结构。"""

from typing import Dict, List, Optional, Sequence, Tuple, Union

import structlog

from .source import ImportSource

logger = structlog.get_logger()


class AwaitingSchema:
    """尚未找到列定义。"""

    def __repr__(self) -> str:
        return "AwaitingSchema()"


class SchemaFixed:
    """列定义已确定，之后不再改变。"""

    def __init__(self, columns: Sequence[str]):
        self.columns: Tuple[str, ...] = tuple(columns)

    def __repr__(self) -> str:
        return f"SchemaFixed(columns={self.columns!r})"


SchemaState = Union[AwaitingSchema, SchemaFixed]


def is_header_candidate(row: Sequence[str], expected_columns: int) -> bool:
    """列数正确且每一列去掉空白后都不为空的行可以作为列定义。"""
    if len(row) != expected_columns:
        return False
    return all(field.strip() for field in row)


def build_record(columns: Sequence[str], row: Sequence[str]) -> Dict[str, str]:
    """按位置把字段和列名对应起来，保留原始字符串。"""
    return dict(zip(columns, row))


class FixedSchemaValidator:
    """列定义预先已知的数据集（城市）。"""

    def __init__(self, columns: Sequence[str], expected_columns: int):
        """初始化验证器。

        Args:
            columns: 列名列表
            expected_columns: 预期列数
        """
        self.state: SchemaState = SchemaFixed(columns)
        self.expected_columns = expected_columns
        self.admitted = 0
        self.dropped = 0

    @property
    def columns(self) -> Tuple[str, ...]:
        return self.state.columns

    def validate(self, row: List[str]) -> Optional[Dict[str, str]]:
        """列数匹配时返回记录，否则丢弃该行并返回 None。"""
        if len(row) == self.expected_columns and len(row) == len(self.columns):
            self.admitted += 1
            return build_record(self.columns, row)
        self.dropped += 1
        return None


class DiscoveredSchemaValidator:
    """列定义需要从文件中发现的数据集（国家）。

    状态只会从 AwaitingSchema 转换到 SchemaFixed 一次。
    第一行满足 is_header_candidate 的数据成为列定义，本身不作为记录输出；
    在此之前的其它行全部丢弃。
    """

    def __init__(self, expected_columns: int):
        self.state: SchemaState = AwaitingSchema()
        self.expected_columns = expected_columns
        self.admitted = 0
        self.dropped = 0

    @property
    def columns(self) -> Tuple[str, ...]:
        if isinstance(self.state, SchemaFixed):
            return self.state.columns
        return ()

    @property
    def has_schema(self) -> bool:
        return isinstance(self.state, SchemaFixed)

    def validate(self, row: List[str]) -> Optional[Dict[str, str]]:
        """验证一行数据。

        Args:
            row: 原始字段列表

        Returns:
            记录字典；列定义行和被丢弃的行返回 None
        """
        if isinstance(self.state, AwaitingSchema):
            if is_header_candidate(row, self.expected_columns):
                self.state = SchemaFixed(row)
                logger.info("发现列定义", columns=list(self.state.columns))
            else:
                self.dropped += 1
            return None

        if len(row) == len(self.state.columns):
            self.admitted += 1
            return build_record(self.state.columns, row)
        self.dropped += 1
        return None


RowValidator = Union[FixedSchemaValidator, DiscoveredSchemaValidator]


def create_validator(source: ImportSource) -> RowValidator:
    """根据数据源选择验证策略。"""
    if source.columns is not None:
        return FixedSchemaValidator(source.columns, source.expected_columns)
    return DiscoveredSchemaValidator(source.expected_columns)
