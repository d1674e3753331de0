"""SQL 仓储基础设施."""

import logging
from collections.abc import AsyncIterator, Iterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

# 多行 INSERT 每批的行数，避免超出 SQLite 的参数个数上限
INSERT_BATCH_SIZE = 100


def dialect_name(session: AsyncSession) -> str:
    """当前会话的数据库方言."""
    return session.get_bind().dialect.name


def upsert(session: AsyncSession, table: Any) -> Any:
    """
    返回支持 ON CONFLICT 的 INSERT 语句.

    PostgreSQL 与 SQLite 的 insert 构造都提供
    on_conflict_do_update / on_conflict_do_nothing。
    """
    if dialect_name(session) == "postgresql":
        return postgresql.insert(table)
    return sqlite.insert(table)


def batched(rows: Sequence[Any], size: int = INSERT_BATCH_SIZE) -> Iterator[Sequence[Any]]:
    """按固定大小切分待写入的行."""
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


class SQLRepository:
    """基于 async_sessionmaker 的仓储基类."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """只读会话."""
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        写事务：成功提交，任何异常（包括取消）回滚后重新抛出.

        Args:
            operation: 操作名称，用于日志
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                logger.warning(f"事务已回滚: {operation}")
                await session.rollback()
                raise
