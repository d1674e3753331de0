"""OPML 导出使用的 SQL 仓储."""

from uuid import UUID

from feedshelf.core.schemas import CategorySubscriptions
from feedshelf.storage.base import SQLRepository
from feedshelf.storage.querying import subscriptions_by_category


class SQLExportingRepository(SQLRepository):
    """导出用户的分类与订阅."""

    async def subscriptions_by_category(self, user_uuid: UUID) -> list[CategorySubscriptions]:
        """分类及其订阅."""
        async with self.session() as session:
            return await subscriptions_by_category(session, user_uuid)
