"""Block-level Markdown tokens consumed by the block builder.

The lexer produces a flat, ordered list of these tokens.  Inline content
is kept as raw Markdown text (``text`` fields); it is split into spans
later by :func:`~docxify.converter.spans.parse_spans`.

The set of token classes is closed: :data:`Token` is their union and the
block builder dispatches on :attr:`kind`.  Anything the lexer cannot map
arrives as an :class:`UnknownToken` so it can be reported and skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class HeadingToken:
    depth: int
    text: str
    kind: ClassVar[str] = "heading"


@dataclass(frozen=True)
class ParagraphToken:
    text: str
    kind: ClassVar[str] = "paragraph"


@dataclass(frozen=True)
class ListItemToken:
    """One list item.

    *text* is the item's own inline text; nested block content (most
    importantly nested lists) is in *children*.
    """

    text: str
    task: bool = False
    checked: bool | None = None
    children: tuple[Token, ...] = ()
    kind: ClassVar[str] = "listitem"


@dataclass(frozen=True)
class ListToken:
    items: tuple[ListItemToken, ...]
    ordered: bool = False
    kind: ClassVar[str] = "list"


@dataclass(frozen=True)
class TableToken:
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()
    kind: ClassVar[str] = "table"


@dataclass(frozen=True)
class CodeToken:
    text: str
    kind: ClassVar[str] = "code"


@dataclass(frozen=True)
class BlockquoteToken:
    children: tuple[Token, ...] = ()
    kind: ClassVar[str] = "blockquote"


@dataclass(frozen=True)
class HorizontalRuleToken:
    kind: ClassVar[str] = "hr"


@dataclass(frozen=True)
class SpaceToken:
    """A run of blank lines separating two blocks."""

    kind: ClassVar[str] = "space"


@dataclass(frozen=True)
class ImageToken:
    href: str
    text: str = ""
    title: str = ""
    kind: ClassVar[str] = "image"


@dataclass(frozen=True)
class TextToken:
    text: str
    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class UnknownToken:
    """Lexer output of a type with no Markdown-to-document mapping."""

    type: str
    raw: str = ""

    @property
    def kind(self) -> str:
        return self.type


Token = Union[
    HeadingToken,
    ParagraphToken,
    ListToken,
    ListItemToken,
    TableToken,
    CodeToken,
    BlockquoteToken,
    HorizontalRuleToken,
    SpaceToken,
    ImageToken,
    TextToken,
    UnknownToken,
]
