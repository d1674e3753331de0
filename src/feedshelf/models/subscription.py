"""Subscription 订阅模型."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid
from sqlmodel import Field, SQLModel

from feedshelf.models.types import UTCDateTime
from feedshelf.utils.dates import utcnow


class Subscription(SQLModel, table=True):
    """用户将 Feed 挂到分类下的订阅关系."""

    __tablename__ = "feed_subscriptions"  # type: ignore[assignment]
    __table_args__ = (UniqueConstraint("user_uuid", "feed_uuid"),)

    uuid: UUID = Field(default_factory=uuid4, primary_key=True)
    user_uuid: UUID = Field(index=True)
    category_uuid: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("feed_categories.uuid", ondelete="CASCADE"),
            nullable=False,
        )
    )
    feed_uuid: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("feed_feeds.uuid", ondelete="CASCADE"),
            nullable=False,
        )
    )
    alias: str = Field(default="", description="显示别名，非空时覆盖 Feed 标题")
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
