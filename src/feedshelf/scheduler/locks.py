"""同步任务锁."""

import asyncio
import logging
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

logger = logging.getLogger(__name__)

# pg_try_advisory_lock 使用的键
SYNCHRONIZATION_LOCK_KEY = 0x66656564


class SyncLock(Protocol):
    """非阻塞获取的互斥锁."""

    async def acquire(self) -> bool:
        """尝试获取锁，已被占用时立即返回 False."""
        ...

    async def release(self) -> None:
        """释放锁."""
        ...


class InProcessLock:
    """进程内锁."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def acquire(self) -> bool:
        if self._lock.locked():
            return False
        await self._lock.acquire()
        return True

    async def release(self) -> None:
        if self._lock.locked():
            self._lock.release()


class PostgresAdvisoryLock:
    """
    PostgreSQL 会话级 advisory lock，跨进程互斥.

    锁绑定在持有的连接上，释放时归还连接。
    """

    def __init__(self, engine: AsyncEngine, key: int = SYNCHRONIZATION_LOCK_KEY) -> None:
        self.engine = engine
        self.key = key
        self._connection: AsyncConnection | None = None

    async def acquire(self) -> bool:
        if self._connection is not None:
            return False

        connection = await self.engine.connect()
        try:
            result = await connection.execute(select(func.pg_try_advisory_lock(self.key)))
            acquired = bool(result.scalar_one())
            # 结束隐式事务，锁本身是会话级的
            await connection.commit()
        except BaseException:
            await connection.close()
            raise

        if not acquired:
            await connection.close()
            return False

        self._connection = connection
        return True

    async def release(self) -> None:
        connection, self._connection = self._connection, None
        if connection is None:
            return

        try:
            await connection.execute(select(func.pg_advisory_unlock(self.key)))
            await connection.commit()
        finally:
            await connection.close()
