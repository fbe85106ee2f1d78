"""记录消费者 - 接收导入的每条记录。"""

from typing import Any, Callable, Dict, List, Protocol, runtime_checkable

import pandas as pd

Record = Dict[str, str]
RecordHandler = Callable[[Record], Any]


@runtime_checkable
class RecordConsumer(Protocol):
    """只有一个 accept 操作的消费者接口。"""

    def accept(self, record: Record) -> Any:
        ...


class RecordCollector:
    """把记录收集到内存中，供 CLI 预览和导出。"""

    def __init__(self):
        self.records: List[Record] = []

    def accept(self, record: Record):
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def to_frame(self) -> pd.DataFrame:
        """转换为 DataFrame，列顺序与记录字段顺序一致。"""
        if not self.records:
            return pd.DataFrame()
        return pd.DataFrame(self.records, columns=list(self.records[0].keys()), dtype=str)


def as_record_handler(consumer: Any) -> RecordHandler:
    """把消费者统一成可调用对象。

    Args:
        consumer: 实现 accept 方法的对象或普通可调用对象

    Returns:
        每条记录调用一次的函数

    Raises:
        ValueError: 消费者不可用
    """
    if isinstance(consumer, RecordConsumer):
        return consumer.accept
    if callable(consumer):
        return consumer
    raise ValueError("记录消费者无效")
