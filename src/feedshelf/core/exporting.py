"""OPML 导出服务."""

from uuid import UUID

from feedshelf.core.repositories import ExportingRepository
from feedshelf.utils.dates import utcnow
from feedshelf.utils.opml import OPMLDocument, Outline

FEED_OUTLINE_TYPE = "rss"


class ExportingService:
    """将用户的分类和订阅导出为 OPML 文档."""

    def __init__(self, repository: ExportingRepository) -> None:
        self.repository = repository

    async def export_as_opml_document(self, user_uuid: UUID, title: str) -> OPMLDocument:
        """
        导出 OPML 文档.

        每个分类一个 outline，其下每个订阅一个 rss 类型的 outline。
        """
        categories = await self.repository.subscriptions_by_category(user_uuid)

        outlines = [
            Outline(
                text=category.name,
                title=category.name,
                children=[
                    Outline(
                        text=subscription.feed_title,
                        title=subscription.feed_title,
                        type=FEED_OUTLINE_TYPE,
                        xml_url=subscription.feed_url,
                    )
                    for subscription in category.subscriptions
                ],
            )
            for category in categories
        ]

        return OPMLDocument(title=title, date_created=utcnow(), outlines=outlines)
