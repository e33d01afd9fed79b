#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/inline.py
"""Inline content resolver.

Turns a run of inline markup into ADF leaf nodes. Recognizers are applied in
a fixed priority order and the first match wins:

1. checkbox syntax ``[ ] text`` / ``[x] text`` (action-marked text)
2. image syntax ``![alt](src)`` (media)
3. formatting runs: code spans, ``**strong**``, ``*em*``, ``~~strike~~``,
   links and hard breaks (text carrying marks)
4. whitespace-split tokens, each tried as a mention, a bare URL inline card,
   a ``[STATUS]`` badge, a ``{panel:...}`` macro, and finally plain text with
   ``:emoji:`` short names split out

Whitespace runs are kept as their own text nodes so spacing survives
re-serialization unchanged.

"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

from doc2conf.adf.nodes import (
    Emoji,
    HardBreak,
    InlineCard,
    Mark,
    Media,
    MediaSingle,
    Mention,
    Node,
    Panel,
    Paragraph,
    Status,
    Text,
)
from doc2conf.constants import ACTION_STATE_DONE, ACTION_STATE_TODO, DEFAULT_PANEL_TYPE, DEFAULT_STATUS_COLOR
from doc2conf.options.conversion import ConversionOptions

TASK_PATTERN = re.compile(r"\[([ xX])\]\s+([^\n]*)")
IMAGE_PATTERN = re.compile(r"!\[(.*?)\]\((.*?)\)")
WHITESPACE_SPLIT = re.compile(r"(\s+)")
MENTION_PATTERN = re.compile(r"^@([a-zA-Z0-9_-]+)$")
URL_PATTERN = re.compile(r"^https?://")
STATUS_PATTERN = re.compile(r"^\[(.*?)\]$")
PANEL_PATTERN = re.compile(r"^\{panel:title=(.*?)\}(.*?)\{panel\}$")
EMOJI_SPLIT = re.compile(r"(:[a-z_]+:)")
ESCAPED_CHAR = re.compile(r"\\([!-/:-@\[-`{-~])")

INLINE_RUN = re.compile(
    r"(?<!\\)(?:"
    r"(?P<code_fence>`+)(?P<code>.+?)(?P=code_fence)"
    r"|\*\*(?P<strong>\S(?:.*?\S)?)\*\*"
    r"|__(?P<strong_u>\S(?:.*?\S)?)__(?!\w)"
    r"|~~(?P<strike>\S(?:.*?\S)?)~~"
    r"|(?<![\w*])\*(?P<em>[^*\s](?:.*?[^*\s])?)\*(?![\w*])"
    r"|(?<![\w_])_(?P<em_u>[^_\s](?:.*?[^_\s])?)_(?![\w_])"
    r"|\[(?P<link_text>[^\]\n]+)\]\((?P<href>[^)\s]+)(?:\s+\"[^\"]*\")?\)"
    r"|(?P<hard_break> {2,}\n|\\\n)"
    r")",
    re.DOTALL,
)

STRONG = Mark(type="strong")
EM = Mark(type="em")
STRIKE = Mark(type="strike")
CODE = Mark(type="code")

ImageBuilder = Callable[[str, str], Optional[Node]]


def action_mark(checked: bool) -> Mark:
    return Mark(type="action", attrs={"state": ACTION_STATE_DONE if checked else ACTION_STATE_TODO})


def external_image(alt: str, src: str) -> Node:
    return MediaSingle(content=[Media(media_type="external", url=src, alt=alt)])


class InlineContentResolver:
    """Resolve inline markup text into ADF leaf nodes.

    Parameters
    ----------
    options : ConversionOptions or None
        Enables mentions, inline cards and emoji
    image_builder : callable, optional
        ``(alt, src) -> Node`` used for image syntax. Defaults to an
        external-URL media reference.

    """

    def __init__(self, options: ConversionOptions | None = None, image_builder: ImageBuilder | None = None) -> None:
        self.options = options or ConversionOptions()
        self.image_builder = image_builder or external_image

    def resolve(self, text: str) -> tuple[Node, ...]:
        """Resolve a text span into leaf nodes in source order."""
        if not text:
            return ()
        if TASK_PATTERN.search(text):
            return tuple(self._resolve_around(text, TASK_PATTERN, self._task_node))
        if IMAGE_PATTERN.search(text):
            return tuple(self._resolve_around(text, IMAGE_PATTERN, self._image_node))
        return tuple(self.resolve_runs(text))

    def _resolve_around(
        self, text: str, pattern: re.Pattern[str], make: Callable[[re.Match[str]], Optional[Node]]
    ) -> list[Node]:
        nodes: list[Node] = []
        last = 0
        for match in pattern.finditer(text):
            if match.start() > last:
                nodes.extend(self.resolve_runs(text[last : match.start()]))
            node = make(match)
            if node is not None:
                nodes.append(node)
            last = match.end()
        if last < len(text):
            nodes.extend(self.resolve_runs(text[last:]))
        return nodes

    @staticmethod
    def _task_node(match: re.Match[str]) -> Optional[Node]:
        if not match.group(2):
            return None
        return Text(text=match.group(2), marks=(action_mark(match.group(1).lower() == "x"),))

    def _image_node(self, match: re.Match[str]) -> Optional[Node]:
        return self.image_builder(match.group(1) or "", match.group(2))

    def resolve_runs(self, text: str, marks: tuple[Mark, ...] = ()) -> list[Node]:
        """Resolve formatting runs, then whitespace-split tokens."""
        nodes: list[Node] = []
        last = 0
        for match in INLINE_RUN.finditer(text):
            if match.start() > last:
                nodes.extend(self.split_tokens(text[last : match.start()], marks))
            nodes.extend(self._run_nodes(match, marks))
            last = match.end()
        if last < len(text):
            nodes.extend(self.split_tokens(text[last:], marks))
        return nodes

    def _run_nodes(self, match: re.Match[str], marks: tuple[Mark, ...]) -> list[Node]:
        groups = match.groupdict()
        if groups["code"] is not None:
            code = groups["code"]
            if len(code) > 2 and code.startswith(" ") and code.endswith(" ") and code.strip():
                code = code[1:-1]
            return [Text(text=code, marks=marks + (CODE,))]
        if groups["strong"] is not None:
            return self.resolve_runs(groups["strong"], marks + (STRONG,))
        if groups["strong_u"] is not None:
            return self.resolve_runs(groups["strong_u"], marks + (STRONG,))
        if groups["strike"] is not None:
            return self.resolve_runs(groups["strike"], marks + (STRIKE,))
        if groups["em"] is not None:
            return self.resolve_runs(groups["em"], marks + (EM,))
        if groups["em_u"] is not None:
            return self.resolve_runs(groups["em_u"], marks + (EM,))
        if groups["link_text"] is not None:
            link = Mark(type="link", attrs={"href": groups["href"]})
            return [Text(text=_unescape(groups["link_text"]), marks=marks + (link,))]
        return [HardBreak()]

    def split_tokens(self, text: str, marks: tuple[Mark, ...] = ()) -> list[Node]:
        """Split on whitespace and run the token recognizers on each part."""
        nodes: list[Node] = []
        for part in WHITESPACE_SPLIT.split(text):
            if not part:
                continue
            if not part.strip():
                nodes.append(Text(text=part, marks=marks))
                continue
            node = self.recognize_token(part)
            if node is not None:
                nodes.append(node)
            else:
                nodes.extend(self._plain_text(part, marks))
        return nodes

    def recognize_token(self, part: str) -> Optional[Node]:
        """Try the token recognizers in priority order, None if none match.

        Recognized tokens are mention, inline card, status and panel nodes,
        none of which carry marks, so enclosing formatting such as
        ``**[DONE]**`` is dropped from them.
        """
        if self.options.parse_mentions and part.startswith("@"):
            match = MENTION_PATTERN.match(part)
            if match:
                return Mention(id=match.group(1), text=part)

        if self.options.parse_inline_cards and URL_PATTERN.match(part):
            return InlineCard(url=part)

        match = STATUS_PATTERN.match(part)
        if match:
            return Status(text=match.group(1), color=DEFAULT_STATUS_COLOR)

        if part.startswith("{panel:"):
            match = PANEL_PATTERN.match(part)
            if match:
                body = match.group(2)
                return Panel(
                    panel_type=DEFAULT_PANEL_TYPE,
                    content=[Paragraph(content=[Text(text=body)] if body else [])],
                )
        return None

    def _plain_text(self, part: str, marks: tuple[Mark, ...]) -> Iterable[Node]:
        part = _unescape(part)
        if not self.options.parse_emoji:
            return [Text(text=part, marks=marks)]
        nodes: list[Node] = []
        for piece in EMOJI_SPLIT.split(part):
            if not piece:
                continue
            if EMOJI_SPLIT.fullmatch(piece):
                nodes.append(Emoji(short_name=piece, id=piece.strip(":"), text=piece))
            else:
                nodes.append(Text(text=piece, marks=marks))
        return nodes


def _unescape(text: str) -> str:
    return ESCAPED_CHAR.sub(r"\1", text)
