"""OPML 导入服务."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

import httpx

from feedshelf.core.errors import FeedShelfError
from feedshelf.core.feeds import FeedService
from feedshelf.models import Subscription
from feedshelf.utils.opml import OPMLDocument, Outline

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Default"


@dataclass
class StatusCount:
    """导入计数."""

    total: int = 0
    created: int = 0

    def inc(self, created: bool) -> None:
        """计数加一."""
        self.total += 1
        if created:
            self.created += 1


@dataclass
class ImportFailure:
    """导入失败的订阅源."""

    feed_url: str
    error: str


@dataclass
class ImportStatus:
    """导入结果."""

    categories: StatusCount = field(default_factory=StatusCount)
    feeds: StatusCount = field(default_factory=StatusCount)
    subscriptions: StatusCount = field(default_factory=StatusCount)
    failures: list[ImportFailure] = field(default_factory=list)

    def user_summary(self) -> str:
        """面向用户的摘要."""
        return (
            f"{self.categories.total} categories ({self.categories.created} new), "
            f"{self.subscriptions.total} subscriptions ({self.subscriptions.created} new)"
        )

    def admin_summary(self) -> str:
        """面向管理员的摘要."""
        return (
            f"{self.categories.total} categories ({self.categories.created} new), "
            f"{self.feeds.total} feeds ({self.feeds.created} new), "
            f"{self.subscriptions.total} subscriptions ({self.subscriptions.created} new)"
        )


def _collect_feed_urls(outlines: list[Outline], feed_urls: list[str]) -> None:
    """收集订阅地址，多层嵌套展平到同一分类."""
    for outline in outlines:
        if outline.is_feed:
            if outline.xml_url and outline.xml_url not in feed_urls:
                feed_urls.append(outline.xml_url)
            continue
        _collect_feed_urls(outline.children, feed_urls)


def outlines_to_categories(outlines: list[Outline]) -> dict[str, list[str]]:
    """
    将 outline 树映射为 {分类名称: 订阅地址列表}.

    顶层订阅节点归入默认分类，顶层的非订阅节点作为分类。
    """
    categories: dict[str, list[str]] = {}

    for outline in outlines:
        if outline.is_feed:
            feed_urls = categories.setdefault(DEFAULT_CATEGORY, [])
            if outline.xml_url and outline.xml_url not in feed_urls:
                feed_urls.append(outline.xml_url)
            continue

        name = outline.label.strip()
        if not name:
            continue
        _collect_feed_urls(outline.children, categories.setdefault(name, []))

    return categories


class ImportingService:
    """从 OPML 文档导入分类和订阅."""

    def __init__(self, feed_service: FeedService) -> None:
        self.feed_service = feed_service

    async def import_from_opml_document(self, user_uuid: UUID, document: OPMLDocument) -> ImportStatus:
        """
        导入 OPML 文档.

        单个订阅源抓取失败只记录并跳过，不中断导入。
        """
        status = ImportStatus()

        for category_name, feed_urls in outlines_to_categories(document.outlines).items():
            category, created = await self.feed_service.get_or_create_category(
                user_uuid, category_name
            )
            status.categories.inc(created)

            for feed_url in feed_urls:
                try:
                    feed, created = await self.feed_service.get_or_create_feed_and_entries(
                        feed_url
                    )
                except (FeedShelfError, httpx.HTTPError) as e:
                    logger.error(f"导入订阅源失败: feed_url={feed_url}, error={e!r}")
                    status.failures.append(ImportFailure(feed_url=feed_url, error=str(e)))
                    continue

                status.feeds.inc(created)

                _, created = await self.feed_service.get_or_create_subscription(
                    Subscription(
                        user_uuid=user_uuid,
                        category_uuid=category.uuid,
                        feed_uuid=feed.uuid,
                    )
                )
                status.subscriptions.inc(created)

        logger.info(f"OPML 导入完成: user={user_uuid}, {status.admin_summary()}")
        return status
