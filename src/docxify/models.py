"""Public data models for docxify.

This module contains the span and block types that make up a document
model, the document model itself, and the result and warning types
returned by the conversion pipeline.  All types are plain dataclasses;
spans, blocks and the document model are frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from docxify.config import HeadingStyle, NumberingLevel, RunStyle

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ImageFormat(str, Enum):
    """Image formats an encoder can embed."""

    PNG = "png"
    JPG = "jpg"
    GIF = "gif"
    BMP = "bmp"


class ImageFailure(str, Enum):
    """Why an image could not be embedded."""

    SVG_SUFFIX = "svg_suffix"
    """The URL ends in ``.svg``; no fetch was attempted."""

    SVG_CONTENT_TYPE = "svg_content_type"
    """The server declared an SVG content type."""

    HTTP_STATUS = "http_status"
    """The server answered with a non-success status."""

    FETCH_ERROR = "fetch_error"
    """The request or the body read raised."""


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlainText:
    """Unformatted text."""

    text: str


@dataclass(frozen=True)
class Bold:
    """Text between ``**`` markers."""

    text: str


@dataclass(frozen=True)
class Italic:
    """Text between single ``*`` markers."""

    text: str


@dataclass(frozen=True)
class Strikethrough:
    """Text between ``~~`` markers."""

    text: str


@dataclass(frozen=True)
class InlineCode:
    """Text between backticks."""

    text: str


@dataclass(frozen=True)
class Hyperlink:
    """``[text](url)``: *text* is displayed, *url* is the target."""

    text: str
    url: str


Span = Union[PlainText, Bold, Italic, Strikethrough, InlineCode, Hyperlink]

CHECKED_GLYPH = "☑ "
UNCHECKED_GLYPH = "☐ "
PICTURE_GLYPH = "\U0001f5bc "
NOT_EMBEDDED_MARKER = " (could not embed)"


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Spacing:
    """Paragraph spacing hint, in twips (``line`` is 240ths of a line)."""

    before: int = 60
    after: int = 60
    line: int = 300


BODY_SPACING = Spacing(60, 60, 300)
FIRST_LIST_ITEM_SPACING = Spacing(80, 40, 300)
LIST_ITEM_SPACING = Spacing(40, 40, 300)


@dataclass(frozen=True)
class Heading:
    level: int
    spans: tuple[Span, ...]


@dataclass(frozen=True)
class Paragraph:
    spans: tuple[Span, ...]
    spacing: Spacing = BODY_SPACING


@dataclass(frozen=True)
class ListItem:
    """One list entry, flattened out of its (possibly nested) list.

    Attributes
    ----------
    level:
        Nesting depth, ``0`` for a top-level list.
    ordered:
        Numbered (``True``) or bulleted (``False``).
    checked:
        ``True``/``False`` for task items, ``None`` otherwise.
    spans:
        Item content, starting with the checkbox glyph for task items.
    list_id:
        Identifier of the list instance the item belongs to.  Every
        nested list gets its own id, so numbering restarts per list.
    index:
        1-based position of the item inside its list instance.
    """

    level: int
    ordered: bool
    checked: bool | None
    spans: tuple[Span, ...]
    list_id: int = 0
    index: int = 1
    spacing: Spacing = LIST_ITEM_SPACING


@dataclass(frozen=True)
class Table:
    """A table whose header row is styled apart from the data rows.

    Rows are kept exactly as lexed: they are neither padded nor truncated
    to the header width.
    """

    header_cells: tuple[tuple[Span, ...], ...]
    rows: tuple[tuple[tuple[Span, ...], ...], ...]

    @property
    def column_count(self) -> int:
        return len(self.header_cells)


@dataclass(frozen=True)
class EmbeddedImage:
    data: bytes = field(repr=False)
    width: int
    height: int
    format: ImageFormat
    alt_text: str = ""
    title: str = ""
    url: str = ""


@dataclass(frozen=True)
class ImageFallback:
    """An image that could not be embedded, shown as a marked link."""

    url: str
    alt_text: str = ""

    @property
    def spans(self) -> tuple[Span, ...]:
        return (
            PlainText(PICTURE_GLYPH),
            Hyperlink(self.alt_text or "Image", self.url),
            PlainText(NOT_EMBEDDED_MARKER),
        )


@dataclass(frozen=True)
class BlockQuoteLine:
    spans: tuple[Span, ...]


@dataclass(frozen=True)
class CodeBlock:
    text: str


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class Spacer:
    pass


Block = Union[
    Heading,
    Paragraph,
    ListItem,
    Table,
    EmbeddedImage,
    ImageFallback,
    BlockQuoteLine,
    CodeBlock,
    Rule,
    Spacer,
]


# ---------------------------------------------------------------------------
# Document model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DocumentModel:
    """Ordered blocks plus the style presets an encoder needs.

    Built once by :func:`~docxify.converter.assembler.assemble_document`
    and never mutated afterwards.
    """

    blocks: tuple[Block, ...]
    numbering: tuple[NumberingLevel, ...]
    heading_styles: tuple[HeadingStyle, ...]
    body: RunStyle
    code_font: str = "Courier New"
    code_size: int = 20
    title: str | None = None


# ---------------------------------------------------------------------------
# Conversion warnings
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered during conversion.

    Warnings are accumulated in result objects so callers can inspect
    them after the operation completes.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"IMAGE_NOT_EMBEDDED"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Image resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchedImage:
    """Image bytes ready for embedding."""

    data: bytes = field(repr=False)
    width: int
    height: int
    format: ImageFormat


@dataclass(frozen=True)
class ImageResolution:
    """Outcome of resolving one image URL.

    Exactly one of *image* and *failure* is set.
    """

    url: str
    image: FetchedImage | None = None
    failure: ImageFailure | None = None
    detail: str = ""

    @property
    def embeddable(self) -> bool:
        return self.image is not None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class ConversionResult:
    """Output of the Markdown-to-document-model conversion.

    Attributes
    ----------
    document:
        The finished, immutable document model.
    warnings:
        Non-fatal issues met during conversion.
    images:
        Every image resolution attempted, in source order.
    """

    document: DocumentModel
    warnings: list[ConversionWarning] = field(default_factory=list)
    images: list[ImageResolution] = field(default_factory=list)


@dataclass
class RenderResult:
    """Output of a full Markdown-to-``.docx`` render.

    Attributes
    ----------
    name:
        Display name of the document.
    content:
        The encoded ``.docx`` bytes.
    blocks:
        Number of blocks in the encoded document model.
    warnings:
        Non-fatal issues met during conversion.
    """

    name: str
    content: bytes = field(repr=False)
    blocks: int = 0
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass(frozen=True)
class RenderRequest:
    """One document of a :meth:`~docxify.AsyncDocxifyClient.render_many` batch."""

    markdown: str
    name: str | None = None
