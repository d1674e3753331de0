"""定时同步."""

from feedshelf.scheduler.locks import InProcessLock, PostgresAdvisoryLock, SyncLock
from feedshelf.scheduler.tasks import (
    SyncScheduler,
    create_scheduler,
    create_sync_lock,
    get_scheduler,
    shutdown_scheduler,
)

__all__ = [
    "InProcessLock",
    "PostgresAdvisoryLock",
    "SyncLock",
    "SyncScheduler",
    "create_scheduler",
    "create_sync_lock",
    "get_scheduler",
    "shutdown_scheduler",
]
