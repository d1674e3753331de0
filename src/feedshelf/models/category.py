"""Category 分类模型."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from feedshelf.models.types import UTCDateTime
from feedshelf.utils.dates import utcnow


class Category(SQLModel, table=True):
    """用户的订阅分类."""

    __tablename__ = "feed_categories"  # type: ignore[assignment]
    __table_args__ = (
        UniqueConstraint("user_uuid", "name"),
        UniqueConstraint("user_uuid", "slug"),
    )

    uuid: UUID = Field(default_factory=uuid4, primary_key=True)
    user_uuid: UUID = Field(index=True)
    name: str = Field(description="名称")
    slug: str = Field(description="slug")
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
