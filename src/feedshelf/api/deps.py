"""API 依赖注入."""

from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from feedshelf.config import Settings, get_settings
from feedshelf.core.entries import EntryBuilder
from feedshelf.core.exporting import ExportingService
from feedshelf.core.feeds import FeedService
from feedshelf.core.importing import ImportingService
from feedshelf.core.querying import QueryingService
from feedshelf.fetcher import FeedClient
from feedshelf.models.database import async_session_maker
from feedshelf.storage import SQLExportingRepository, SQLFeedRepository, SQLQueryingRepository


def get_user_uuid(x_user_uuid: UUID = Header(..., description="当前用户 UUID")) -> UUID:
    """当前用户，由前置的认证层通过请求头传入."""
    return x_user_uuid


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """会话工厂."""
    return async_session_maker()


def get_feed_client(request: Request) -> FeedClient:
    """应用共享的订阅源客户端."""
    return request.app.state.feed_client


def get_feed_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    client: FeedClient = Depends(get_feed_client),
    settings: Settings = Depends(get_settings),
) -> FeedService:
    """订阅管理服务."""
    return FeedService(
        SQLFeedRepository(session_factory),
        client,
        EntryBuilder.from_settings(settings),
    )


def get_querying_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
) -> QueryingService:
    """阅读页查询服务."""
    return QueryingService(SQLQueryingRepository(session_factory), settings.entries_per_page)


def get_importing_service(
    feed_service: FeedService = Depends(get_feed_service),
) -> ImportingService:
    """OPML 导入服务."""
    return ImportingService(feed_service)


def get_exporting_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ExportingService:
    """OPML 导出服务."""
    return ExportingService(SQLExportingRepository(session_factory))
