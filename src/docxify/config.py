"""Configuration for docxify.

:class:`DocxifyConfig` is a frozen-friendly dataclass that captures every
tuneable knob of the conversion pipeline.  Instances are passed to
:class:`~docxify.converter.md_to_docx.MarkdownToDocxConverter` and
:class:`~docxify.async_client.AsyncDocxifyClient`.

Document styling lives in :class:`StyleConfig`, which the Document
Assembler bundles into every :class:`~docxify.models.DocumentModel`.
Sizes are expressed in half-points and indents in twips, the units used
by word-processor documents.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Literal

# ---------------------------------------------------------------------------
# Style presets
# ---------------------------------------------------------------------------

NumberFormat = Literal["decimal", "lowerLetter", "lowerRoman"]


@dataclass(frozen=True)
class RunStyle:
    """Default character formatting for body text."""

    font: str = "Arial"
    size: int = 24
    color: str = "000000"


@dataclass(frozen=True)
class HeadingStyle:
    """Character and paragraph formatting for one heading level."""

    level: int
    size: int
    bold: bool = True
    color: str = "000000"
    font: str = "Arial"
    space_before: int = 200
    space_after: int = 100


@dataclass(frozen=True)
class NumberingLevel:
    """One level of the ordered-list numbering definition."""

    level: int
    format: NumberFormat
    text: str
    indent_left: int
    hanging: int = 360


def _default_heading_styles() -> tuple[HeadingStyle, ...]:
    sizes = (32, 28, 26, 24, 22, 20)
    return tuple(
        HeadingStyle(
            level=level,
            size=size,
            space_before=max(200 - 40 * (level - 1), 60),
            space_after=max(100 - 20 * (level - 1), 40),
        )
        for level, size in enumerate(sizes, start=1)
    )


def _default_numbering() -> tuple[NumberingLevel, ...]:
    formats: tuple[NumberFormat, ...] = ("decimal", "lowerLetter", "lowerRoman")
    return tuple(
        NumberingLevel(
            level=level,
            format=fmt,
            text=f"%{level + 1}.",
            indent_left=720 * (level + 1),
        )
        for level, fmt in enumerate(formats)
    )


@dataclass(frozen=True)
class StyleConfig:
    """Style and numbering presets applied to every assembled document.

    Parameters
    ----------
    body:
        Default run style (font family and base size).
    headings:
        Six heading presets, level 1 first.  Sizes decrease with level.
    numbering:
        Numbering levels for ordered lists: decimal, lower-alphabetic and
        lower-roman, each indented proportionally to its level.
    code_font:
        Monospace font used for inline code and code blocks.
    code_size:
        Font size of code blocks.
    """

    body: RunStyle = field(default_factory=RunStyle)
    headings: tuple[HeadingStyle, ...] = field(default_factory=_default_heading_styles)
    numbering: tuple[NumberingLevel, ...] = field(default_factory=_default_numbering)
    code_font: str = "Courier New"
    code_size: int = 20

    def heading(self, level: int) -> HeadingStyle:
        """Return the preset for heading *level*, clamped to 1..6."""
        level = min(max(level, 1), len(self.headings))
        return self.headings[level - 1]


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

DEFAULT_DOCUMENT_NAME = "Converted from Markdown"


@dataclass
class DocxifyConfig:
    """Complete configuration for a docxify conversion.

    Every parameter has a default, so ``DocxifyConfig()`` is a working
    configuration.

    Parameters
    ----------
    image_width:
        Width, in pixels, given to every embedded image.  Images are not
        decoded, so the real size is never probed.
    image_height:
        Height, in pixels, given to every embedded image.
    timeout_seconds:
        HTTP timeout for the single image fetch attempt.
    http_proxy:
        Optional HTTP/HTTPS proxy URL for image fetches.
    user_agent:
        ``User-Agent`` header sent with image fetches.
    max_list_depth:
        Deepest list nesting level that is materialised as its own level.
        Items of deeper lists are emitted at this level.
    strip_code_wrapper:
        Remove a surrounding ```` ```markdown ```` (or bare ```` ``` ````)
        fence that wraps the whole input before lexing.
    default_document_name:
        Display name used when a caller does not supply one.
    style:
        Style and numbering presets for the assembled document.
    metrics:
        Optional :class:`~docxify.observability.MetricsHook` backend.
    debug_dump_tokens:
        Write the lexed token stream to *stderr* on each conversion.
    """

    # ── Images ──────────────────────────────────────────────────────────
    image_width: int = 400

    image_height: int = 300

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    user_agent: str = "docxify/0.1"

    # ── Lists ───────────────────────────────────────────────────────────
    max_list_depth: int = 8

    # ── Input ───────────────────────────────────────────────────────────
    strip_code_wrapper: bool = True

    default_document_name: str = DEFAULT_DOCUMENT_NAME

    # ── Styling ─────────────────────────────────────────────────────────
    style: StyleConfig = field(default_factory=StyleConfig)

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_tokens: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.image_width <= 0:
            raise ValueError(f"image_width must be > 0, got {self.image_width}")
        if self.image_height <= 0:
            raise ValueError(f"image_height must be > 0, got {self.image_height}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.max_list_depth < 1:
            raise ValueError(f"max_list_depth must be >= 1, got {self.max_list_depth}")
        if len(self.style.headings) != 6:
            raise ValueError(
                f"style.headings must define 6 levels, got {len(self.style.headings)}"
            )

    def __repr__(self) -> str:
        """Hide proxy credentials from logs and tracebacks."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "http_proxy" and val and "@" in val:
                parts.append("http_proxy='****'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"DocxifyConfig({', '.join(parts)})"
