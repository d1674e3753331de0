"""测试辅助：模拟订阅源服务器与 Atom 文档生成."""

from datetime import UTC, datetime

import httpx

FEED_URL = "https://example.com/feed.xml"
TEST_USER_AGENT = "feedshelf-test/1.0"


def atom_feed(
    title: str,
    entries: list[dict],
    subtitle: str = "",
    updated: datetime = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC),
) -> bytes:
    """
    生成 Atom 文档.

    每个条目为 {"title", "link", "summary", "updated"}，updated 可省略。
    """
    items = []
    for entry in entries:
        entry_updated = entry.get("updated", updated)
        items.append(
            f"""
  <entry>
    <title>{entry["title"]}</title>
    <link href="{entry["link"]}"/>
    <id>{entry["link"]}</id>
    <updated>{entry_updated.strftime("%Y-%m-%dT%H:%M:%SZ")}</updated>
    <summary type="html">{entry.get("summary", "")}</summary>
  </entry>"""
        )

    return f"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>{title}</title>
  <subtitle>{subtitle}</subtitle>
  <id>urn:test:{title}</id>
  <updated>{updated.strftime("%Y-%m-%dT%H:%M:%SZ")}</updated>{"".join(items)}
</feed>
""".encode()


class FeedServer:
    """模拟订阅源服务器，支持 ETag 条件请求."""

    def __init__(self) -> None:
        self.documents: dict[str, tuple[bytes, str]] = {}
        self.statuses: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def publish(self, url: str, body: bytes, etag: str = "") -> None:
        """发布（或替换）订阅源内容."""
        self.documents[url] = (body, etag)
        self.statuses.pop(url, None)

    def fail(self, url: str, status_code: int) -> None:
        """让订阅地址返回指定状态码."""
        self.statuses[url] = status_code

    def requests_for(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if url in self.statuses:
            return httpx.Response(self.statuses[url])
        if url not in self.documents:
            return httpx.Response(404)

        body, etag = self.documents[url]
        if etag and request.headers.get("If-None-Match") == etag:
            return httpx.Response(304, headers={"ETag": etag})

        headers = {"Content-Type": "application/atom+xml"}
        if etag:
            headers["ETag"] = etag
        return httpx.Response(200, content=body, headers=headers)

