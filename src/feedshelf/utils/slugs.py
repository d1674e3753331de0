"""Slug 生成."""

from anyascii import anyascii
from slugify import slugify


def make_slug(value: str) -> str:
    """
    生成 ASCII 小写、短横线分隔的 slug.

    先将 Unicode 转写为 ASCII，转写后为空时返回空字符串。
    """
    return slugify(anyascii(value.strip()), lowercase=True)
