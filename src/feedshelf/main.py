"""feedshelf 主应用入口."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feedshelf.api import categories, entries, opml, preferences, reading, subscriptions, sync
from feedshelf.api.errors import register_exception_handlers
from feedshelf.config import get_settings
from feedshelf.core.sync import Synchronizer
from feedshelf.fetcher import FeedClient
from feedshelf.models.database import async_session_maker, close_db, get_engine, init_db
from feedshelf.scheduler import create_scheduler, create_sync_lock, shutdown_scheduler
from feedshelf.storage import SQLSynchronizingRepository

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """应用生命周期管理."""
    app_settings = get_settings()

    # 启动时初始化
    logger.info("正在初始化数据库...")
    await init_db(app_settings.database_url)

    feed_client = FeedClient(
        app_settings.http_user_agent,
        timeout=app_settings.effective_http_timeout,
    )
    app.state.feed_client = feed_client

    logger.info("正在启动定时任务...")
    synchronizer = Synchronizer.from_settings(
        app_settings,
        SQLSynchronizingRepository(async_session_maker()),
        feed_client,
    )
    create_scheduler(
        app_settings,
        synchronizer,
        create_sync_lock(app_settings, get_engine()),
    )

    logger.info("feedshelf 启动完成")
    yield

    # 关闭时清理
    logger.info("正在关闭...")
    await shutdown_scheduler()
    await feed_client.close()
    await close_db()
    logger.info("feedshelf 已关闭")


app = FastAPI(
    title="feedshelf",
    description="自托管 RSS/Atom 订阅与阅读服务",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 注册路由
app.include_router(reading.router)
app.include_router(categories.router)
app.include_router(subscriptions.router)
app.include_router(entries.router)
app.include_router(preferences.router)
app.include_router(opml.router)
app.include_router(sync.router)


@app.get("/")
async def root() -> dict:
    """根路径."""
    return {
        "name": "feedshelf",
        "version": "0.1.0",
        "description": "自托管 RSS/Atom 订阅与阅读服务",
    }


@app.get("/health")
async def health() -> dict:
    """健康检查."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "feedshelf.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
