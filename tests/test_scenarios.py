"""端到端场景：订阅、阅读、同步、删除与检索."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from feedshelf.core.feeds import FeedService
from feedshelf.core.querying import QueryingService
from feedshelf.core.sync import Synchronizer
from feedshelf.models import Entry, EntryVisibility, Feed, Preferences
from feedshelf.utils.dates import utcnow
from helpers import FeedServer, atom_feed

EXAMPLE_URL = "http://example/feed.atom"
NOW = utcnow().replace(microsecond=0)

ENTRY_A = {"title": "A", "link": "http://example/a", "summary": "entry a", "updated": NOW}
ENTRY_B = {
    "title": "B",
    "link": "http://example/b",
    "summary": "entry b",
    "updated": NOW - timedelta(days=1),
}
ENTRY_C = {
    "title": "C",
    "link": "http://example/c",
    "summary": "entry c",
    "updated": NOW + timedelta(days=1),
}


def prefs(user_uuid: UUID, visibility: EntryVisibility = EntryVisibility.ALL) -> Preferences:
    return Preferences(user_uuid=user_uuid, show_entries=visibility)


async def entry_count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(Entry))
        return int(result.scalar_one())


async def example_feed(session_factory: async_sessionmaker[AsyncSession]) -> Feed:
    async with session_factory() as session:
        result = await session.execute(select(Feed).where(Feed.feed_url == EXAMPLE_URL))
        return result.scalar_one()


class TestScenarios:
    """完整阅读流程."""

    async def test_subscription_lifecycle(
        self,
        feed_service: FeedService,
        querying_service: QueryingService,
        synchronizer: Synchronizer,
        feed_server: FeedServer,
        session_factory: async_sessionmaker[AsyncSession],
        user_uuid: UUID,
    ) -> None:
        querying_service.entries_per_page = 20
        feed_server.publish(EXAMPLE_URL, atom_feed("Example", [ENTRY_A, ENTRY_B]), etag='"e1"')

        # 订阅并阅读
        linux = await feed_service.create_category(user_uuid, "Linux")
        assert linux.slug == "linux"
        await feed_service.subscribe(user_uuid, linux.uuid, EXAMPLE_URL)

        page = await querying_service.feeds_by_page(user_uuid, prefs(user_uuid), 1)
        assert page.page.total_pages == 1
        assert page.unread == 2
        assert [c.name for c in page.categories] == ["Linux"]
        assert [f.title for f in page.categories[0].feeds] == ["Example"]
        assert [e.title for e in page.entries] == ["A", "B"]
        assert not any(e.read for e in page.entries)

        # 可见性过滤
        await feed_service.toggle_entry_read(user_uuid, page.entries[0].uid)

        unread_page = await querying_service.feeds_by_page(
            user_uuid, prefs(user_uuid, EntryVisibility.UNREAD), 1
        )
        assert [e.title for e in unread_page.entries] == ["B"]
        assert unread_page.unread == 1

        read_page = await querying_service.feeds_by_page(
            user_uuid, prefs(user_uuid, EntryVisibility.READ), 1
        )
        assert [e.title for e in read_page.entries] == ["A"]

        # 条件请求：304 不修改条目
        before = await example_feed(session_factory)
        entries_before = await entry_count(session_factory)

        await synchronizer.synchronize("scenario-304")

        after = await example_feed(session_factory)
        assert await entry_count(session_factory) == entries_before
        assert after.etag == '"e1"'
        assert after.fetched_at > before.fetched_at

        # 新条目
        feed_server.publish(
            EXAMPLE_URL, atom_feed("Example", [ENTRY_C, ENTRY_A, ENTRY_B]), etag='"e2"'
        )

        await synchronizer.synchronize("scenario-new")

        updated = await example_feed(session_factory)
        assert updated.etag == '"e2"'
        assert updated.hash != after.hash

        page = await querying_service.feeds_by_page(user_uuid, prefs(user_uuid), 1)
        assert [e.title for e in page.entries] == ["C", "A", "B"]
        assert page.unread == 2

        # 删除分类
        await feed_service.delete_category(user_uuid, linux.uuid)

        page = await querying_service.feeds_by_page(user_uuid, prefs(user_uuid), 1)
        assert page.categories == []
        assert page.entries == []
        assert await entry_count(session_factory) == 0

    async def test_full_text_search(
        self,
        feed_service: FeedService,
        querying_service: QueryingService,
        feed_server: FeedServer,
        user_uuid: UUID,
    ) -> None:
        feed_server.publish(
            EXAMPLE_URL,
            atom_feed(
                "Example",
                [
                    {
                        "title": "Vinyl pressing",
                        "link": "http://example/vinyl",
                        "summary": "An authentic production process for records.",
                        "updated": NOW,
                    },
                    {
                        "title": "Tape decks",
                        "link": "http://example/tape",
                        "summary": "Production notes, not so authentic.",
                        "updated": NOW - timedelta(hours=1),
                    },
                ],
            ),
        )
        feed_server.publish(
            "http://music.example/feed.atom",
            atom_feed(
                "Music",
                [
                    {
                        "title": "Studio diary",
                        "link": "http://music.example/studio",
                        "summary": "Authentic production of a live album.",
                        "updated": NOW - timedelta(hours=2),
                    },
                    {
                        "title": "Tour dates",
                        "link": "http://music.example/tour",
                        "summary": "Upcoming concerts.",
                        "updated": NOW - timedelta(hours=3),
                    },
                ],
            ),
        )
        category = await feed_service.create_category(user_uuid, "Audio")
        await feed_service.subscribe(user_uuid, category.uuid, EXAMPLE_URL)
        await feed_service.subscribe(user_uuid, category.uuid, "http://music.example/feed.atom")

        page = await querying_service.feeds_by_query_and_page(
            user_uuid, prefs(user_uuid), '"authentic production"', 1
        )

        assert page.page.search_terms == '"authentic production"'
        assert page.page.item_count == 2
        assert [e.title for e in page.entries] == ["Vinyl pressing", "Studio diary"]
