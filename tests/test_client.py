"""测试订阅源客户端."""

from datetime import UTC, datetime

import httpx
import pytest

from feedshelf.core.errors import FeedParseError, UnexpectedStatusError
from feedshelf.fetcher import FeedClient, parse_feed
from helpers import FEED_URL, TEST_USER_AGENT, FeedServer, atom_feed

RSS_DOCUMENT = b"""<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>RSS Example</title>
    <description>An RSS channel</description>
    <link>https://rss.example.com/</link>
    <item>
      <title>Item one</title>
      <link>https://rss.example.com/1</link>
      <description>&lt;p&gt;Body&lt;/p&gt;</description>
      <pubDate>Tue, 02 Jan 2024 08:30:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


class TestParseFeed:
    """parse_feed 测试."""

    def test_atom(self) -> None:
        body = atom_feed(
            "Atom Example",
            [{"title": "Entry", "link": "https://example.com/e", "summary": "text"}],
            subtitle="sub",
        )
        feed = parse_feed(body)
        assert feed.title == "Atom Example"
        assert feed.description == "sub"
        assert len(feed.items) == 1
        assert feed.items[0].link == "https://example.com/e"
        assert feed.items[0].updated_at == datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def test_rss(self) -> None:
        feed = parse_feed(RSS_DOCUMENT)
        assert feed.title == "RSS Example"
        assert feed.description == "An RSS channel"
        item = feed.items[0]
        assert item.title == "Item one"
        assert item.description == "<p>Body</p>"
        assert item.published_at == datetime(2024, 1, 2, 8, 30, 0, tzinfo=UTC)

    def test_not_a_feed(self) -> None:
        with pytest.raises(FeedParseError):
            parse_feed(b"this is not a feed")


class TestFeedClient:
    """FeedClient 测试."""

    async def test_fetch_ok(
        self, feed_client: FeedClient, feed_server: FeedServer, sample_feed: bytes
    ) -> None:
        result = await feed_client.fetch(FEED_URL)

        assert result.status_code == 200
        assert not result.not_modified
        assert result.etag == '"v1"'
        assert result.hash != 0
        assert result.feed is not None
        assert result.feed.title == "Example Blog"
        assert len(result.feed.items) == 3

        request = feed_server.requests[-1]
        assert request.headers["User-Agent"] == TEST_USER_AGENT
        assert "If-None-Match" not in request.headers
        assert "If-Modified-Since" not in request.headers

    async def test_hash_is_stable(self, feed_client: FeedClient, sample_feed: bytes) -> None:
        first = await feed_client.fetch(FEED_URL)
        second = await feed_client.fetch(FEED_URL)
        assert first.hash == second.hash

    async def test_conditional_request(
        self, feed_client: FeedClient, feed_server: FeedServer, sample_feed: bytes
    ) -> None:
        last_modified = datetime(2024, 1, 1, 8, 0, 0, tzinfo=UTC)
        result = await feed_client.fetch(FEED_URL, etag='"v1"', last_modified=last_modified)

        assert result.not_modified
        assert result.feed is None
        assert result.etag == '"v1"'
        assert result.last_modified == last_modified

        request = feed_server.requests[-1]
        assert request.headers["If-None-Match"] == '"v1"'
        assert request.headers["If-Modified-Since"] == "Mon, 01 Jan 2024 08:00:00 GMT"

    async def test_unexpected_status(self, feed_client: FeedClient, feed_server: FeedServer) -> None:
        feed_server.fail(FEED_URL, 500)

        with pytest.raises(UnexpectedStatusError) as exc_info:
            await feed_client.fetch(FEED_URL)
        assert exc_info.value.status_code == 500

    async def test_last_modified_header(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=RSS_DOCUMENT,
                headers={"Last-Modified": "Wed, 03 Jan 2024 10:00:00 GMT"},
            )

        async with FeedClient(TEST_USER_AGENT, transport=httpx.MockTransport(handler)) as client:
            result = await client.fetch("https://rss.example.com/feed")

        assert result.last_modified == datetime(2024, 1, 3, 10, 0, 0, tzinfo=UTC)
        assert result.etag == ""

    async def test_redirects_are_followed(self, feed_server: FeedServer, sample_feed: bytes) -> None:
        moved = "https://old.example.com/feed"

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == moved:
                return httpx.Response(301, headers={"Location": FEED_URL})
            return feed_server.handler(request)

        async with FeedClient(TEST_USER_AGENT, transport=httpx.MockTransport(handler)) as client:
            result = await client.fetch(moved)

        assert result.status_code == 200
        assert result.feed is not None

    def test_empty_user_agent(self) -> None:
        with pytest.raises(ValueError):
            FeedClient("")
