"""Entry 条目模型."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, Column, ForeignKey, String, UniqueConstraint, Uuid
from sqlmodel import Field, SQLModel

from feedshelf.models.types import SEARCH_VECTOR, UTCDateTime
from feedshelf.utils.dates import utcnow


class Entry(SQLModel, table=True):
    """订阅源中的单个条目，按 (feed_uuid, url) 去重."""

    __tablename__ = "feed_entries"  # type: ignore[assignment]
    __table_args__ = (UniqueConstraint("feed_uuid", "url"),)

    uid: str = Field(primary_key=True, description="KSUID")
    feed_uuid: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("feed_feeds.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    url: str = Field(description="原文链接")
    title: str = Field(description="标题")
    summary: str = Field(default="", description="摘要")
    textrank_terms: list[str] = Field(default_factory=list, sa_type=JSON)
    fulltextsearch_tsv: str | None = Field(default=None, sa_type=SEARCH_VECTOR)
    published_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class EntryMetadata(SQLModel, table=True):
    """用户对条目的阅读状态，缺失即未读."""

    __tablename__ = "feed_entries_metadata"  # type: ignore[assignment]

    user_uuid: UUID = Field(primary_key=True)
    entry_uid: str = Field(
        sa_column=Column(
            String,
            ForeignKey("feed_entries.uid", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    read: bool = Field(default=False)
