"""订阅子系统错误定义."""


class FeedShelfError(Exception):
    """所有业务错误的基类."""

    message = "feeds: unexpected error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


# 错误类别


class ValidationError(FeedShelfError):
    """输入校验失败."""


class NotFoundError(FeedShelfError):
    """记录不存在."""


class ConflictError(FeedShelfError):
    """记录已存在."""


class RemoteError(FeedShelfError):
    """远程订阅源错误."""


# Feed


class FeedURLInvalidError(ValidationError):
    """Feed URL 无效."""

    message = "feed: invalid URL"


class FeedURLRequiredError(FeedURLInvalidError):
    """Feed URL 为空."""

    message = "feed: URL required"


class FeedURLNoSchemeError(FeedURLInvalidError):
    """Feed URL 缺少协议."""

    message = "feed: missing URL scheme"


class FeedURLUnsupportedSchemeError(FeedURLInvalidError):
    """Feed URL 协议不支持."""

    message = "feed: unsupported URL scheme"


class FeedURLNoHostError(FeedURLInvalidError):
    """Feed URL 缺少主机名."""

    message = "feed: missing URL host"


class FeedTitleRequiredError(ValidationError):
    """Feed 标题为空."""

    message = "feed: title required"


class FeedSlugRequiredError(ValidationError):
    """Feed slug 为空."""

    message = "feed: slug required"


class FeedNotFoundError(NotFoundError):
    """Feed 不存在."""

    message = "feed: not found"


# Entry


class EntryURLInvalidError(ValidationError):
    """条目 URL 无效."""

    message = "entry: invalid URL"


class EntryTitleRequiredError(ValidationError):
    """条目标题为空."""

    message = "entry: title required"


class EntryUIDInvalidError(ValidationError):
    """条目 UID 无效."""

    message = "entry: invalid UID"


class EntryNotFoundError(NotFoundError):
    """条目不存在."""

    message = "entry: not found"


class EntryMetadataNotFoundError(NotFoundError):
    """条目阅读状态不存在."""

    message = "entry-metadata: not found"


# Category


class CategoryNameRequiredError(ValidationError):
    """分类名称为空."""

    message = "category: name required"


class CategorySlugRequiredError(ValidationError):
    """分类 slug 为空."""

    message = "category: slug required"


class CategoryAlreadyRegisteredError(ConflictError):
    """同名或同 slug 分类已存在."""

    message = "category: already registered"


class CategoryNotFoundError(NotFoundError):
    """分类不存在."""

    message = "category: not found"


# Subscription


class SubscriptionAlreadyRegisteredError(ConflictError):
    """用户已订阅该 Feed."""

    message = "subscription: already registered"


class SubscriptionNotFoundError(NotFoundError):
    """订阅不存在."""

    message = "subscription: not found"


# Preferences / Querying


class PreferencesEntryVisibilityUnknownError(ValidationError):
    """未知的条目可见性."""

    message = "preferences: unknown entry visibility"


class PageNumberOutOfBoundsError(ValidationError):
    """页码越界."""

    message = "querying: invalid page index (out of bounds)"


# Fetching


class UnexpectedStatusError(RemoteError):
    """远程返回了非 200/304 状态码."""

    message = "fetching: unexpected HTTP status"

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"{self.message}: {status_code}")


class FeedParseError(RemoteError):
    """响应内容无法解析为 Atom/RSS."""

    message = "fetching: failed to parse feed"


# Synchronizing


class SynchronizationError(FeedShelfError):
    """同步任务中一个或多个 Feed 失败."""

    message = "synchronizing: some feeds failed"

    def __init__(self, errors: list[BaseException]) -> None:
        self.errors = errors
        super().__init__(f"{self.message} ({len(errors)} errors)")
