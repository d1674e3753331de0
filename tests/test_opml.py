"""测试 OPML 解析与生成."""

from datetime import UTC, datetime

import pytest

from feedshelf.core.importing import DEFAULT_CATEGORY, outlines_to_categories
from feedshelf.utils.opml import OPMLDocument, OPMLError, Outline, parse_opml, render_opml

OPML_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<opml version="2.0">
  <head><title>My feeds</title></head>
  <body>
    <outline text="Linux" title="Linux">
      <outline type="rss" text="LWN" xmlUrl="https://lwn.net/headlines/rss"/>
      <outline text="Distros">
        <outline type="rss" text="Debian" xmlUrl="https://debian.org/News/news"/>
      </outline>
    </outline>
    <outline type="rss" text="Loose" xmlUrl="https://loose.example.com/feed"/>
  </body>
</opml>
"""


class TestParseOPML:
    """parse_opml 测试."""

    def test_parse(self) -> None:
        document = parse_opml(OPML_DOCUMENT)

        assert document.title == "My feeds"
        assert len(document.outlines) == 2

        linux = document.outlines[0]
        assert linux.label == "Linux"
        assert not linux.is_feed
        assert linux.children[0].is_feed
        assert linux.children[0].xml_url == "https://lwn.net/headlines/rss"

    def test_invalid_xml(self) -> None:
        with pytest.raises(OPMLError):
            parse_opml(b"<opml><body>")

    def test_wrong_root(self) -> None:
        with pytest.raises(OPMLError):
            parse_opml(b"<rss><channel/></rss>")

    def test_missing_body(self) -> None:
        with pytest.raises(OPMLError):
            parse_opml(b"<opml version='2.0'><head/></opml>")


class TestOutlinesToCategories:
    """outlines_to_categories 测试."""

    def test_nested_feeds_are_flattened(self) -> None:
        categories = outlines_to_categories(parse_opml(OPML_DOCUMENT).outlines)

        assert categories["Linux"] == [
            "https://lwn.net/headlines/rss",
            "https://debian.org/News/news",
        ]
        assert categories[DEFAULT_CATEGORY] == ["https://loose.example.com/feed"]


class TestRenderOPML:
    """render_opml 测试."""

    def test_render_then_parse(self) -> None:
        document = OPMLDocument(
            title="Export",
            date_created=datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC),
            outlines=[
                Outline(
                    text="News",
                    title="News",
                    children=[
                        Outline(
                            text="Example",
                            title="Example",
                            type="rss",
                            xml_url="https://example.com/feed.xml",
                        )
                    ],
                )
            ],
        )

        content = render_opml(document)
        assert b'<opml version="2.0">' in content
        assert b"Mon, 01 Jan 2024 00:00:00 GMT" in content

        parsed = parse_opml(content)
        assert parsed.title == "Export"
        assert parsed.outlines[0].label == "News"
        assert parsed.outlines[0].children[0].xml_url == "https://example.com/feed.xml"
