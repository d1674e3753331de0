"""Feed 订阅源模型."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from feedshelf.models.types import SEARCH_VECTOR, UTCDateTime, UnsignedBigInteger
from feedshelf.utils.dates import utcnow


class Feed(SQLModel, table=True):
    """远程订阅源，按 URL 全局去重."""

    __tablename__ = "feed_feeds"  # type: ignore[assignment]

    uuid: UUID = Field(default_factory=uuid4, primary_key=True)
    feed_url: str = Field(unique=True, description="订阅地址")
    title: str = Field(description="标题")
    description: str = Field(default="", description="描述")
    slug: str = Field(unique=True, description="由标题生成的 slug")
    etag: str = Field(default="", description="上次响应的 ETag")
    last_modified: datetime | None = Field(
        default=None, sa_type=UTCDateTime, description="上次响应的 Last-Modified"
    )
    hash: int = Field(default=0, sa_type=UnsignedBigInteger, description="内容 xxHash64")
    fulltextsearch_tsv: str | None = Field(default=None, sa_type=SEARCH_VECTOR)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    fetched_at: datetime | None = Field(
        default=None, sa_type=UTCDateTime, description="上次同步时间"
    )
