"""应用配置管理."""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置（环境变量）."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 数据库配置
    database_url: str = "sqlite+aiosqlite:///./feedshelf.db"

    # 同步配置
    synchronization_interval: timedelta = timedelta(hours=1)
    feeds_per_job: int = Field(default=20, gt=0)
    min_feed_age: timedelta = timedelta(hours=6)
    worker_count: int = Field(default=5, gt=0)
    sync_task_timeout: timedelta = timedelta(minutes=5)
    sync_lock: Literal["memory", "postgresql"] = "memory"
    scheduler_enabled: bool = True

    # HTTP 客户端配置
    http_user_agent: str = Field(
        default="feedshelf/0.1.0",
        min_length=1,
    )
    http_timeout: timedelta | None = None

    # 条目处理配置
    summary_keep_under: int = 300
    summary_truncate_after: int = 500
    textrank_top_n: int = 10

    # 阅读页配置
    entries_per_page: int = Field(default=20, gt=0)

    @property
    def effective_http_timeout(self) -> float:
        """单次抓取超时（秒），默认为同步间隔除以并发数."""
        if self.http_timeout is not None:
            return self.http_timeout.total_seconds()
        return (self.synchronization_interval / self.worker_count).total_seconds()


@lru_cache
def get_settings() -> Settings:
    """获取应用配置（带缓存）."""
    return Settings()
