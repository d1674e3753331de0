"""固定并发的工作池."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkerPool(Generic[T]):
    """
    固定数量的 worker 依次消费任务队列.

    单个任务失败不会中断其他任务，错误被收集后统一返回；
    外层任务被取消时所有 worker 随之取消。
    """

    def __init__(self, size: int, name: str = "worker") -> None:
        if size < 1:
            msg = f"worker 数量必须大于 0: {size}"
            raise ValueError(msg)
        self.size = size
        self.name = name

    async def run(
        self,
        items: Iterable[T],
        handler: Callable[[T], Awaitable[None]],
    ) -> list[Exception]:
        """
        处理所有任务并等待完成.

        Args:
            items: 待处理的任务
            handler: 处理单个任务的协程函数

        Returns:
            失败任务的异常列表
        """
        queue: asyncio.Queue[T] = asyncio.Queue()
        for item in items:
            queue.put_nowait(item)

        if queue.empty():
            return []

        errors: list[Exception] = []

        async def worker() -> None:
            while True:
                try:
                    item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                try:
                    await handler(item)
                except Exception as e:
                    errors.append(e)
                finally:
                    queue.task_done()

        workers = [
            asyncio.create_task(worker(), name=f"{self.name}-{i}")
            for i in range(min(self.size, queue.qsize()))
        ]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

        return errors
