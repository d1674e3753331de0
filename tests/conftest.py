"""测试配置和 fixtures."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID, uuid4

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from feedshelf.core.entries import EntryBuilder
from feedshelf.core.feeds import FeedService
from feedshelf.core.querying import QueryingService
from feedshelf.core.sync import Synchronizer
from feedshelf.fetcher import FeedClient
from feedshelf.models import Category
from feedshelf.models.database import create_engine, create_session_factory, create_tables
from feedshelf.storage import (
    SQLExportingRepository,
    SQLFeedRepository,
    SQLQueryingRepository,
    SQLSynchronizingRepository,
)
from helpers import FEED_URL, TEST_USER_AGENT, FeedServer, atom_feed


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """测试数据库引擎（临时文件，多个连接共享数据）."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'feedshelf.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """测试会话工厂."""
    return create_session_factory(engine)


@pytest.fixture
def feed_server() -> FeedServer:
    """模拟订阅源服务器."""
    return FeedServer()


@pytest.fixture
async def feed_client(feed_server: FeedServer) -> AsyncGenerator[FeedClient, None]:
    """连接模拟服务器的订阅源客户端."""
    client = FeedClient(TEST_USER_AGENT, transport=httpx.MockTransport(feed_server.handler))
    yield client
    await client.close()


@pytest.fixture
def feed_repository(session_factory: async_sessionmaker[AsyncSession]) -> SQLFeedRepository:
    return SQLFeedRepository(session_factory)


@pytest.fixture
def querying_repository(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLQueryingRepository:
    return SQLQueryingRepository(session_factory)


@pytest.fixture
def synchronizing_repository(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLSynchronizingRepository:
    return SQLSynchronizingRepository(session_factory)


@pytest.fixture
def exporting_repository(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLExportingRepository:
    return SQLExportingRepository(session_factory)


@pytest.fixture
def feed_service(feed_repository: SQLFeedRepository, feed_client: FeedClient) -> FeedService:
    """订阅管理服务."""
    return FeedService(feed_repository, feed_client, EntryBuilder())


@pytest.fixture
def querying_service(querying_repository: SQLQueryingRepository) -> QueryingService:
    """阅读页查询服务，每页 2 条便于测试分页."""
    return QueryingService(querying_repository, entries_per_page=2)


@pytest.fixture
def synchronizer(
    synchronizing_repository: SQLSynchronizingRepository,
    feed_client: FeedClient,
) -> Synchronizer:
    """同步服务，单 worker 保证顺序确定."""
    return Synchronizer(
        synchronizing_repository,
        feed_client,
        EntryBuilder(),
        feeds_per_job=20,
        min_feed_age=timedelta(0),
        worker_count=1,
    )


@pytest.fixture
def user_uuid() -> UUID:
    return uuid4()


@pytest.fixture
async def category(feed_service: FeedService, user_uuid: UUID) -> Category:
    """默认分类."""
    return await feed_service.create_category(user_uuid, "News")


@pytest.fixture
def sample_feed(feed_server: FeedServer) -> bytes:
    """发布一个包含三个条目的订阅源."""
    body = atom_feed(
        "Example Blog",
        [
            {
                "title": "First post",
                "link": "https://example.com/posts/1",
                "summary": "&lt;p&gt;Hello from the first post about python asyncio.&lt;/p&gt;",
                "updated": datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC),
            },
            {
                "title": "Second post",
                "link": "https://example.com/posts/2",
                "summary": "&lt;p&gt;Second post covers sqlite full text search.&lt;/p&gt;",
                "updated": datetime(2024, 1, 2, 10, 0, 0, tzinfo=UTC),
            },
            {
                "title": "Third post",
                "link": "https://example.com/posts/3",
                "summary": "&lt;p&gt;Third post about gardening tomatoes.&lt;/p&gt;",
                "updated": datetime(2024, 1, 3, 10, 0, 0, tzinfo=UTC),
            },
        ],
        subtitle="Notes about software",
    )
    feed_server.publish(FEED_URL, body, etag='"v1"')
    return body
