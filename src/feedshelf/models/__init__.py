"""数据模型."""

from feedshelf.models.category import Category
from feedshelf.models.database import init_db
from feedshelf.models.entry import Entry, EntryMetadata
from feedshelf.models.feed import Feed
from feedshelf.models.preferences import EntryVisibility, Preferences
from feedshelf.models.subscription import Subscription

__all__ = [
    "Category",
    "Entry",
    "EntryMetadata",
    "EntryVisibility",
    "Feed",
    "Preferences",
    "Subscription",
    "init_db",
]
