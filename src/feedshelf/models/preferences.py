"""Preferences 用户显示偏好模型."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlmodel import Field, SQLModel

from feedshelf.models.types import UTCDateTime
from feedshelf.utils.dates import utcnow


class EntryVisibility(str, Enum):
    """阅读页条目可见性."""

    ALL = "ALL"
    READ = "READ"
    UNREAD = "UNREAD"


class Preferences(SQLModel, table=True):
    """用户阅读偏好."""

    __tablename__ = "feed_preferences"  # type: ignore[assignment]

    user_uuid: UUID = Field(primary_key=True)
    show_entries: EntryVisibility = Field(default=EntryVisibility.ALL)
    show_entry_summaries: bool = Field(default=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
