"""SQL 持久化."""

from feedshelf.storage.exporting import SQLExportingRepository
from feedshelf.storage.feeds import SQLFeedRepository
from feedshelf.storage.querying import SQLQueryingRepository
from feedshelf.storage.synchronizing import SQLSynchronizingRepository

__all__ = [
    "SQLExportingRepository",
    "SQLFeedRepository",
    "SQLQueryingRepository",
    "SQLSynchronizingRepository",
]
