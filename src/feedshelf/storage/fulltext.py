"""全文检索.

PostgreSQL 使用 tsvector 与 websearch_to_tsquery；SQLite 存储规范化后的
小写文本，查询时逐词做子串匹配，支持引号短语和 "-" 排除。
"""

import re
from typing import Any

from sqlalchemy import String, Text, and_, cast, func, literal, not_, true
from sqlalchemy.dialects.postgresql import TSVECTOR

# 语料和查询统一将 / 和 . 替换为空格
_REPLACE_TABLE = str.maketrans({"/": " ", ".": " "})

_QUERY_TOKEN_PATTERN = re.compile(r'(-?)"([^"]*)"|(\S+)')


def replace_separators(text: str) -> str:
    """将 / 和 . 替换为空格."""
    return text.translate(_REPLACE_TABLE)


def search_document(*parts: str) -> str:
    """拼接并规范化待索引文本."""
    return " ".join(replace_separators(part) for part in parts if part)


def search_vector(dialect: str, *parts: str) -> Any:
    """生成写入 fulltextsearch_tsv 列的值."""
    document = search_document(*parts)
    if dialect == "postgresql":
        return func.to_tsvector(literal(document, String), type_=TSVECTOR)
    return " ".join(document.lower().split())


def _parse_query(terms: str) -> list[tuple[bool, str]]:
    """解析为 (是否排除, 词或短语) 列表."""
    parsed: list[tuple[bool, str]] = []
    for match in _QUERY_TOKEN_PATTERN.finditer(terms):
        negated, phrase, word = match.groups()
        if phrase is not None:
            phrase = " ".join(phrase.lower().split())
            if phrase:
                parsed.append((negated == "-", phrase))
            continue

        word = word.lower()
        if word == "or":
            continue
        if word.startswith("-") and len(word) > 1:
            parsed.append((True, word[1:]))
        elif word != "-":
            parsed.append((False, word))
    return parsed


def search_condition(dialect: str, feed_vector: Any, entry_vector: Any, terms: str) -> Any:
    """
    生成匹配 Feed 与条目合并向量的查询条件.

    Args:
        dialect: 数据库方言
        feed_vector: Feed 的 fulltextsearch_tsv 列
        entry_vector: 条目的 fulltextsearch_tsv 列
        terms: 用户输入的查询
    """
    query = replace_separators(terms)

    if dialect == "postgresql":
        return feed_vector.op("||")(entry_vector).op("@@")(
            func.websearch_to_tsquery(literal(query, String))
        )

    document = (
        literal(" ")
        + func.coalesce(cast(feed_vector, Text), "")
        + literal(" ")
        + func.coalesce(cast(entry_vector, Text), "")
        + literal(" ")
    )
    conditions = []
    for negated, term in _parse_query(query):
        condition = document.contains(term, autoescape=True)
        conditions.append(not_(condition) if negated else condition)

    if not conditions:
        return true()
    return and_(*conditions)
