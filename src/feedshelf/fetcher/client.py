"""订阅源 HTTP 客户端."""

import logging
from dataclasses import dataclass
from datetime import datetime

import httpx
import xxhash

from feedshelf.core.errors import UnexpectedStatusError
from feedshelf.fetcher.parsing import ParsedFeed, parse_feed
from feedshelf.utils.dates import format_http_date, parse_http_date

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """一次抓取的结果."""

    status_code: int
    etag: str = ""
    last_modified: datetime | None = None
    hash: int = 0
    feed: ParsedFeed | None = None

    @property
    def not_modified(self) -> bool:
        """远程内容未变化（304）."""
        return self.status_code == httpx.codes.NOT_MODIFIED


class FeedClient:
    """
    订阅源客户端.

    每次调用只发出一个条件 GET 请求，不做重试。
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not user_agent:
            msg = "User-Agent 不能为空"
            raise ValueError(msg)

        self.user_agent = user_agent
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def close(self) -> None:
        """关闭客户端."""
        await self._client.aclose()

    async def __aenter__(self) -> "FeedClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_headers(self, etag: str, last_modified: datetime | None) -> dict[str, str]:
        """构造条件请求头."""
        headers = {"User-Agent": self.user_agent}
        if etag:
            headers["If-None-Match"] = etag
        if last_modified is not None:
            headers["If-Modified-Since"] = format_http_date(last_modified)
        return headers

    async def fetch(
        self,
        url: str,
        etag: str = "",
        last_modified: datetime | None = None,
    ) -> FetchResult:
        """
        抓取并解析订阅源.

        Args:
            url: 订阅地址
            etag: 上次响应的 ETag
            last_modified: 上次响应的 Last-Modified

        Returns:
            304 时只包含缓存头，200 时包含解析结果和内容哈希

        Raises:
            UnexpectedStatusError: 状态码既不是 200 也不是 304
            FeedParseError: 内容无法解析
            httpx.HTTPError: 网络错误
        """
        response = await self._client.get(
            url,
            headers=self._get_headers(etag, last_modified),
        )

        if response.status_code == httpx.codes.NOT_MODIFIED:
            logger.debug(f"订阅源未变化: {url}")
            return FetchResult(
                status_code=response.status_code,
                etag=response.headers.get("ETag") or etag,
                last_modified=last_modified,
            )

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(response.status_code)

        body = response.content
        return FetchResult(
            status_code=response.status_code,
            etag=response.headers.get("ETag", ""),
            last_modified=parse_http_date(response.headers.get("Last-Modified")),
            hash=xxhash.xxh64_intdigest(body),
            feed=parse_feed(body),
        )
