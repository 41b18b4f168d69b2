"""docxify: convert Markdown to Word (``.docx``) documents.

Public re-exports
-----------------

* **Client:** :class:`AsyncDocxifyClient`
* **Configuration:** :class:`DocxifyConfig`, :class:`StyleConfig`
* **Pipeline:** :class:`MarkdownToDocxConverter`, :func:`encode_document`
* **Errors:** Every :class:`DocxifyError` subclass and :class:`ErrorCode`
* **Models:** Spans, blocks, the document model and result types

Usage::

    from docxify import AsyncDocxifyClient

    async with AsyncDocxifyClient() as client:
        result = await client.render("# Hello\\n\\nWorld", name="Notes")
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from docxify.async_client import AsyncDocxifyClient

# ── Configuration ───────────────────────────────────────────────────────
from docxify.config import (
    DEFAULT_DOCUMENT_NAME,
    DocxifyConfig,
    HeadingStyle,
    NumberingLevel,
    RunStyle,
    StyleConfig,
)

# ── Pipeline ────────────────────────────────────────────────────────────
from docxify.converter import MarkdownToDocxConverter, assemble_document, parse_spans
from docxify.encoder import encode_document

# ── Errors ──────────────────────────────────────────────────────────────
from docxify.errors import (
    DocxifyConversionError,
    DocxifyEncodingError,
    DocxifyError,
    DocxifyValidationError,
    ErrorCode,
)
from docxify.image import ImageResolver

# ── Models ──────────────────────────────────────────────────────────────
from docxify.models import (
    Block,
    BlockQuoteLine,
    Bold,
    CodeBlock,
    ConversionResult,
    ConversionWarning,
    DocumentModel,
    EmbeddedImage,
    Heading,
    Hyperlink,
    ImageFailure,
    ImageFallback,
    ImageFormat,
    ImageResolution,
    InlineCode,
    Italic,
    ListItem,
    Paragraph,
    PlainText,
    RenderRequest,
    RenderResult,
    Rule,
    Spacer,
    Span,
    Strikethrough,
    Table,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Client
    "AsyncDocxifyClient",
    # Configuration
    "DocxifyConfig",
    "StyleConfig",
    "RunStyle",
    "HeadingStyle",
    "NumberingLevel",
    "DEFAULT_DOCUMENT_NAME",
    # Pipeline
    "MarkdownToDocxConverter",
    "ImageResolver",
    "assemble_document",
    "encode_document",
    "parse_spans",
    # Errors
    "DocxifyError",
    "ErrorCode",
    "DocxifyValidationError",
    "DocxifyConversionError",
    "DocxifyEncodingError",
    # Models: spans
    "Span",
    "PlainText",
    "Bold",
    "Italic",
    "Strikethrough",
    "InlineCode",
    "Hyperlink",
    # Models: blocks
    "Block",
    "Heading",
    "Paragraph",
    "ListItem",
    "Table",
    "EmbeddedImage",
    "ImageFallback",
    "BlockQuoteLine",
    "CodeBlock",
    "Rule",
    "Spacer",
    "DocumentModel",
    # Models: results
    "ConversionResult",
    "ConversionWarning",
    "ImageResolution",
    "RenderRequest",
    "RenderResult",
    # Models: enums
    "ImageFormat",
    "ImageFailure",
]
