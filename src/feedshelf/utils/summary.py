"""摘要生成."""

import re

_PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n\s*\n")

_PARAGRAPH_SEPARATOR = "\n\n"

ELLIPSIS = "…"


def _byte_length(text: str) -> int:
    return len(text.encode())


def summarize(text: str, keep_if_under: int, truncate_after: int) -> str:
    """
    生成文本摘要.

    UTF-8 字节数不超过 keep_if_under 的文本原样返回；否则按空行切分段落，
    依次保留完整段落，拼接结果（含段落间的空行）不超过 truncate_after 字节。
    只有一个段落（或首段已超长）时保留前 truncate_after 个字符并追加省略号，
    不会截断多字节字符。

    对同一组参数重复调用结果不变。

    Args:
        text: 纯文本
        keep_if_under: 原样保留的字节数上限
        truncate_after: 摘要长度上限

    Returns:
        摘要文本
    """
    if not text:
        return ""

    if _byte_length(text) <= keep_if_under:
        return text

    paragraphs = _PARAGRAPH_SPLIT_PATTERN.split(text)
    if len(paragraphs) == 1:
        return _truncate(paragraphs[0], truncate_after)

    summary = _join_paragraphs(paragraphs, truncate_after)
    if summary:
        return summary

    # 首段已超过上限
    first = next((p.strip() for p in paragraphs if p.strip()), "")
    return _truncate(first, truncate_after)


def _truncate(paragraph: str, truncate_after: int) -> str:
    if len(paragraph) <= truncate_after:
        return paragraph
    return paragraph[:truncate_after].strip() + ELLIPSIS


def _join_paragraphs(paragraphs: list[str], truncate_after: int) -> str:
    kept: list[str] = []
    length = 0

    for paragraph in paragraphs:
        paragraph = paragraph.strip()
        if not paragraph:
            continue

        added = _byte_length(paragraph)
        if kept:
            added += len(_PARAGRAPH_SEPARATOR)
        if length + added > truncate_after:
            break

        kept.append(paragraph)
        length += added

    return _PARAGRAPH_SEPARATOR.join(kept)
