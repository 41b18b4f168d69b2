"""Markdown to document-model conversion pipeline.

Public API:

- :class:`MarkdownToDocxConverter`: Markdown to :class:`DocumentModel`.
- :class:`MarkdownLexer`: lex Markdown into block tokens.
- :func:`build_blocks`: convert block tokens to document blocks.
- :func:`parse_spans`: split inline text into styled spans.
- :func:`materialize_list`: flatten nested lists into list-item blocks.
- :func:`build_table`: convert a table token to a table block.
- :func:`assemble_document`: bundle blocks with style presets.
"""

from docxify.converter.assembler import assemble_document
from docxify.converter.block_builder import build_blocks
from docxify.converter.lexer import MarkdownLexer
from docxify.converter.lists import materialize_list
from docxify.converter.md_to_docx import MarkdownToDocxConverter, strip_code_wrapper
from docxify.converter.spans import INLINE_RULES, parse_spans, span_text
from docxify.converter.tables import build_table

__all__ = [
    "INLINE_RULES",
    "MarkdownLexer",
    "MarkdownToDocxConverter",
    "assemble_document",
    "build_blocks",
    "build_table",
    "materialize_list",
    "parse_spans",
    "span_text",
    "strip_code_wrapper",
]
