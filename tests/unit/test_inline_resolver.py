"""Unit tests for inline content resolution.

These tests exercise the recognizer order (checkbox, image, formatting runs,
whitespace tokens) and the option switches for mentions, inline cards and
emoji.
"""

import pytest

from doc2conf.adf.nodes import (
    Emoji,
    HardBreak,
    InlineCard,
    Media,
    MediaSingle,
    Mention,
    Panel,
    Status,
    Text,
)
from doc2conf.options.conversion import ConversionOptions
from doc2conf.parsers.inline import InlineContentResolver


def _texts(nodes) -> str:
    return "".join(node.text for node in nodes if isinstance(node, Text))


def _mark_types(node: Text) -> list[str]:
    return [mark.type for mark in node.marks]


@pytest.mark.unit
class TestFormattingRuns:
    """Tests for marks produced by formatting runs."""

    def test_plain_text_keeps_whitespace_nodes(self) -> None:
        """Test that whitespace runs survive as their own text nodes."""
        nodes = InlineContentResolver().resolve("a  b")
        assert [node.text for node in nodes] == ["a", "  ", "b"]

    def test_node_texts_rebuild_plain_span(self) -> None:
        """Test that the resolved node texts joined together give back the input."""
        source = "Hello  big\tworld :smile: done now"
        nodes = InlineContentResolver().resolve(source)

        assert "".join(node.text for node in nodes) == source
        assert any(isinstance(node, Emoji) for node in nodes)

    def test_strong_and_em(self) -> None:
        """Test strong and emphasis runs."""
        nodes = InlineContentResolver().resolve("Hello **world** and *you*")

        strong = next(n for n in nodes if isinstance(n, Text) and n.text == "world")
        em = next(n for n in nodes if isinstance(n, Text) and n.text == "you")
        assert _mark_types(strong) == ["strong"]
        assert _mark_types(em) == ["em"]

    def test_nested_marks_outer_first(self) -> None:
        """Test that nested runs list the outer mark first."""
        nodes = InlineContentResolver().resolve("**bold _both_**")
        both = next(n for n in nodes if isinstance(n, Text) and n.text == "both")
        assert _mark_types(both) == ["strong", "em"]

    def test_code_span_is_literal(self) -> None:
        """Test that code spans are not parsed further."""
        nodes = InlineContentResolver().resolve("run `a*b*c` now")
        code = next(n for n in nodes if isinstance(n, Text) and n.text == "a*b*c")
        assert _mark_types(code) == ["code"]

    def test_strikethrough(self) -> None:
        """Test strikethrough runs."""
        nodes = InlineContentResolver().resolve("~~gone~~")
        assert _mark_types(nodes[0]) == ["strike"]

    def test_link(self) -> None:
        """Test that links carry an href mark."""
        nodes = InlineContentResolver().resolve("see [the site](https://example.com)")
        link = nodes[-1]
        assert link.text == "the site"
        assert link.marks[0].type == "link"
        assert link.marks[0].attrs == {"href": "https://example.com"}

    def test_hard_break(self) -> None:
        """Test a backslash line break."""
        nodes = InlineContentResolver().resolve("one\\\ntwo")
        assert any(isinstance(node, HardBreak) for node in nodes)

    def test_escaped_markers_are_literal(self) -> None:
        """Test that backslash-escaped markers do not start a run."""
        nodes = InlineContentResolver().resolve("\\*not em\\*")
        assert _texts(nodes) == "*not em*"
        assert all(not node.marks for node in nodes if isinstance(node, Text))


@pytest.mark.unit
class TestTokenRecognizers:
    """Tests for whitespace-split token recognizers."""

    def test_mentions_disabled_by_default(self) -> None:
        """Test that @names stay text unless mentions are enabled."""
        nodes = InlineContentResolver().resolve("@alice")
        assert nodes == (Text(text="@alice"),)

    def test_mention(self) -> None:
        """Test mention recognition."""
        resolver = InlineContentResolver(ConversionOptions(parse_mentions=True))
        nodes = resolver.resolve("ping @alice")
        assert nodes[-1] == Mention(id="alice", text="@alice")

    def test_inline_card(self) -> None:
        """Test bare URLs as inline cards."""
        resolver = InlineContentResolver(ConversionOptions(parse_inline_cards=True))
        nodes = resolver.resolve("see https://example.com/page")
        assert nodes[-1] == InlineCard(url="https://example.com/page")

    def test_bare_url_stays_text_by_default(self) -> None:
        """Test that URLs are plain text when inline cards are off."""
        nodes = InlineContentResolver().resolve("https://example.com")
        assert isinstance(nodes[0], Text)

    def test_status_badge(self) -> None:
        """Test that a bracketed token becomes a grey status."""
        nodes = InlineContentResolver().resolve("state [BLOCKED]")
        assert nodes[-1] == Status(text="BLOCKED", color="grey")

    def test_status_inside_strong_drops_marks(self) -> None:
        """Test that a recognized token does not keep enclosing formatting."""
        nodes = InlineContentResolver().resolve("**[DONE]**")
        assert nodes == (Status(text="DONE", color="grey"),)

    def test_inline_panel(self) -> None:
        """Test the single-token panel macro."""
        nodes = InlineContentResolver().resolve("{panel:title=Note}careful{panel}")
        panel = nodes[0]
        assert isinstance(panel, Panel)
        assert panel.panel_type == "info"
        assert _texts(panel.content[0].content) == "careful"

    def test_emoji(self) -> None:
        """Test that short names are split out of words."""
        nodes = InlineContentResolver().resolve("nice:smile:")
        assert nodes[0] == Text(text="nice")
        assert nodes[1] == Emoji(short_name=":smile:", id="smile", text=":smile:")

    def test_emoji_disabled(self) -> None:
        """Test that emoji parsing can be switched off."""
        resolver = InlineContentResolver(ConversionOptions(parse_emoji=False))
        assert resolver.resolve(":smile:") == (Text(text=":smile:"),)


@pytest.mark.unit
class TestPriorityRecognizers:
    """Tests for checkbox and image syntax, which win over formatting runs."""

    def test_checkbox_text_gets_action_mark(self) -> None:
        """Test that checkbox syntax yields action-marked text."""
        nodes = InlineContentResolver().resolve("[x] shipped")
        assert nodes[0].text == "shipped"
        assert nodes[0].marks[0].type == "action"
        assert nodes[0].marks[0].attrs == {"state": "done"}

    def test_unchecked_checkbox(self) -> None:
        """Test the todo action state."""
        nodes = InlineContentResolver().resolve("[ ] pending")
        assert nodes[0].marks[0].attrs == {"state": "todo"}

    def test_image_default_builder(self) -> None:
        """Test that image syntax becomes an external media reference."""
        nodes = InlineContentResolver().resolve("![logo](img/logo.png)")
        single = nodes[0]
        assert isinstance(single, MediaSingle)
        assert single.content[0] == Media(media_type="external", url="img/logo.png", alt="logo")

    def test_image_custom_builder(self) -> None:
        """Test that the injected image builder is used."""
        calls = []

        def build(alt: str, src: str):
            calls.append((alt, src))
            return Text(text=f"[{alt}]")

        nodes = InlineContentResolver(image_builder=build).resolve("before ![a](b.png)")
        assert calls == [("a", "b.png")]
        assert nodes[-1] == Text(text="[a]")
