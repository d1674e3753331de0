"""自定义列类型."""

from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, DateTime, Text
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.types import TypeDecorator

from feedshelf.utils.dates import to_utc

_UINT64_OFFSET = 1 << 64
_INT64_MAX = (1 << 63) - 1


class UnsignedBigInteger(TypeDecorator[int]):
    """64 位无符号整数，以有符号 BIGINT 存储."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: Any) -> int | None:
        if value is None:
            return None
        if value > _INT64_MAX:
            return value - _UINT64_OFFSET
        return value

    def process_result_value(self, value: int | None, dialect: Any) -> int | None:
        if value is None:
            return None
        if value < 0:
            return value + _UINT64_OFFSET
        return value


class UTCDateTime(TypeDecorator[datetime]):
    """带时区的 UTC 时间；SQLite 读出的 naive 值按 UTC 处理."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        return None if value is None else to_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        return None if value is None else to_utc(value)


# PostgreSQL 使用 tsvector，SQLite 退化为规范化后的纯文本
SEARCH_VECTOR = TSVECTOR().with_variant(Text(), "sqlite")
