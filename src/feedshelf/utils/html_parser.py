"""HTML 解析工具."""

import re

from bs4 import BeautifulSoup

# 块级元素前后补空行，保留段落结构
_BLOCK_TAGS = [
    "address",
    "article",
    "aside",
    "blockquote",
    "dd",
    "div",
    "dl",
    "dt",
    "figcaption",
    "figure",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "ol",
    "p",
    "pre",
    "section",
    "table",
    "tr",
    "ul",
]

# 转义后残留的标签文本，例如 "&lt;tag&gt;"
_TAG_REMNANT_PATTERN = re.compile(r" <[^>]+>")


def html_to_text(html: str) -> str:
    """
    将 HTML 转换为纯文本.

    使用 Unix 换行，列表项以 "- " 开头，链接保留文字，
    清除残留的标签文本后去除首尾空白。

    Args:
        html: HTML 内容

    Returns:
        提取的纯文本内容
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")

    # 移除不可见内容
    for element in soup(["script", "style", "head", "noscript", "template"]):
        element.decompose()

    for br in soup.find_all("br"):
        br.replace_with("\n")

    for item in soup.find_all("li"):
        item.insert_before("\n- ")

    for block in soup.find_all(_BLOCK_TAGS):
        block.insert_before("\n\n")
        block.insert_after("\n\n")

    text = soup.get_text()

    # 合并行内空白
    lines = [" ".join(line.split()) for line in text.replace("\r", "\n").split("\n")]
    text = "\n".join(lines)

    # 合并连续空行
    text = re.sub(r"\n{3,}", "\n\n", text)

    text = _TAG_REMNANT_PATTERN.sub("", text)

    return text.strip()
