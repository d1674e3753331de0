"""OPML 文档解析与生成."""

from dataclasses import dataclass, field
from datetime import datetime

from lxml import etree

from feedshelf.utils.dates import format_http_date, utcnow

OPML_VERSION = "2.0"


class OPMLError(ValueError):
    """OPML 文档格式错误."""


@dataclass
class Outline:
    """OPML outline 节点."""

    text: str = ""
    title: str = ""
    type: str = ""
    xml_url: str = ""
    html_url: str = ""
    children: list["Outline"] = field(default_factory=list)

    @property
    def label(self) -> str:
        """显示名称，优先使用 title."""
        return self.title or self.text

    @property
    def is_feed(self) -> bool:
        """是否为订阅节点."""
        return self.type.lower() == "rss" or (not self.children and bool(self.xml_url))


@dataclass
class OPMLDocument:
    """OPML 文档."""

    title: str = ""
    date_created: datetime | None = None
    outlines: list[Outline] = field(default_factory=list)


def _parse_outline(element: etree._Element) -> Outline:
    return Outline(
        text=(element.get("text") or "").strip(),
        title=(element.get("title") or "").strip(),
        type=(element.get("type") or "").strip(),
        xml_url=(element.get("xmlUrl") or "").strip(),
        html_url=(element.get("htmlUrl") or "").strip(),
        children=[_parse_outline(child) for child in element.iterfind("outline")],
    )


def parse_opml(content: bytes | str) -> OPMLDocument:
    """
    解析 OPML 文档.

    Args:
        content: OPML XML 内容

    Returns:
        解析后的文档

    Raises:
        OPMLError: 内容不是合法的 OPML
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as e:
        msg = f"无效的 OPML 文档: {e}"
        raise OPMLError(msg) from e

    if root.tag != "opml":
        msg = f"无效的 OPML 根节点: {root.tag}"
        raise OPMLError(msg)

    body = root.find("body")
    if body is None:
        msg = "OPML 文档缺少 body"
        raise OPMLError(msg)

    return OPMLDocument(
        title=(root.findtext("head/title") or "").strip(),
        outlines=[_parse_outline(element) for element in body.iterfind("outline")],
    )


def _append_outline(parent: etree._Element, outline: Outline) -> None:
    element = etree.SubElement(parent, "outline")
    element.set("text", outline.text)
    if outline.title:
        element.set("title", outline.title)
    if outline.type:
        element.set("type", outline.type)
    if outline.xml_url:
        element.set("xmlUrl", outline.xml_url)
    if outline.html_url:
        element.set("htmlUrl", outline.html_url)
    for child in outline.children:
        _append_outline(element, child)


def render_opml(document: OPMLDocument) -> bytes:
    """生成 OPML 2.0 XML."""
    root = etree.Element("opml", version=OPML_VERSION)

    head = etree.SubElement(root, "head")
    etree.SubElement(head, "title").text = document.title
    etree.SubElement(head, "dateCreated").text = format_http_date(
        document.date_created or utcnow()
    )

    body = etree.SubElement(root, "body")
    for outline in document.outlines:
        _append_outline(body, outline)

    return etree.tostring(
        root, xml_declaration=True, encoding="UTF-8", pretty_print=True
    )
