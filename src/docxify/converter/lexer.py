"""Lex Markdown into the block-level token stream.

This module wraps mistune v3's block parser and maps its raw block tokens
onto the closed :data:`~docxify.converter.tokens.Token` union.  Only the
block phase of mistune runs: inline content is kept as raw Markdown text
because inline formatting is handled by
:func:`~docxify.converter.spans.parse_spans`.

Mistune-to-token mapping:
    heading -> HeadingToken, paragraph -> ParagraphToken,
    block_text -> TextToken, list -> ListToken,
    list_item / task_list_item -> ListItemToken, table -> TableToken,
    block_code -> CodeToken, block_quote -> BlockquoteToken,
    thematic_break -> HorizontalRuleToken, blank_line -> SpaceToken

Every other mistune type becomes an :class:`UnknownToken`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import mistune

from docxify.converter.tokens import (
    BlockquoteToken,
    CodeToken,
    HeadingToken,
    HorizontalRuleToken,
    ListItemToken,
    ListToken,
    ParagraphToken,
    SpaceToken,
    TableToken,
    TextToken,
    Token,
    UnknownToken,
)

# Same characters mistune strips before inline parsing.
_INLINE_STRIP = " \r\n\t\f"

# Blocks whose syntax swallows the blank lines that follow them.
_CONSUMES_TRAILING_BLANKS: frozenset[str] = frozenset({"heading", "thematic_break"})


class MarkdownLexer:
    """Parse Markdown and produce an ordered list of block tokens."""

    def __init__(self) -> None:
        self._md = mistune.create_markdown(
            renderer=None,
            plugins=["strikethrough", "table", "task_lists"],
        )

    def lex(self, markdown: str) -> list[Token]:
        """Lex *markdown* into block tokens, in source order."""
        raw_tokens = self._parse_blocks(markdown)
        return self._convert_tokens(raw_tokens)

    def _parse_blocks(self, markdown: str) -> list[dict[str, Any]]:
        """Run mistune's block phase (and its pre-render hooks) only."""
        source = markdown.replace("\r\n", "\n").replace("\r", "\n")
        if source and not source.endswith("\n"):
            source += "\n"

        state = self._md.block.state_cls()
        state.process(source)
        for hook in self._md.before_parse_hooks:
            hook(self._md, state)
        self._md.block.parse(state)
        for hook in self._md.before_render_hooks:
            hook(self._md, state)
        return state.tokens

    def _convert_tokens(self, raw_tokens: list[dict[str, Any]]) -> list[Token]:
        result: list[Token] = []
        previous_type = ""
        for raw in raw_tokens:
            raw_type = raw.get("type", "")
            if raw_type == "blank_line" and previous_type in _CONSUMES_TRAILING_BLANKS:
                previous_type = raw_type
                continue
            previous_type = raw_type
            result.append(self._convert_token(raw))
        return result

    def _convert_token(self, raw: dict[str, Any]) -> Token:
        raw_type = raw.get("type", "")
        converter = _CONVERTERS.get(raw_type)
        if converter is None:
            return UnknownToken(type=raw_type or "unknown", raw=_raw_text(raw))
        return converter(self, raw)

    # ------------------------------------------------------------------
    # Per-type converters
    # ------------------------------------------------------------------

    def _heading(self, raw: dict[str, Any]) -> Token:
        depth = raw.get("attrs", {}).get("level", 1)
        return HeadingToken(depth=depth, text=_inline_text(raw))

    def _paragraph(self, raw: dict[str, Any]) -> Token:
        return ParagraphToken(text=_inline_text(raw))

    def _block_text(self, raw: dict[str, Any]) -> Token:
        return TextToken(text=_inline_text(raw))

    def _list(self, raw: dict[str, Any]) -> Token:
        ordered = bool(raw.get("attrs", {}).get("ordered", False))
        items = tuple(
            self._list_item(child)
            for child in raw.get("children", [])
            if child.get("type") in ("list_item", "task_list_item")
        )
        return ListToken(items=items, ordered=ordered)

    def _list_item(self, raw: dict[str, Any]) -> ListItemToken:
        is_task = raw.get("type") == "task_list_item"
        texts: list[str] = []
        children: list[Token] = []
        for child in raw.get("children", []):
            child_type = child.get("type", "")
            if child_type in ("paragraph", "block_text") and not children:
                texts.append(_inline_text(child))
            elif child_type != "blank_line":
                children.append(self._convert_token(child))
        return ListItemToken(
            text="\n".join(texts),
            task=is_task,
            checked=bool(raw.get("attrs", {}).get("checked")) if is_task else None,
            children=tuple(children),
        )

    def _table(self, raw: dict[str, Any]) -> Token:
        header: tuple[str, ...] = ()
        rows: list[tuple[str, ...]] = []
        for part in raw.get("children", []):
            part_type = part.get("type", "")
            if part_type == "table_head":
                header = _cell_texts(part.get("children", []))
            elif part_type == "table_body":
                for row in part.get("children", []):
                    if row.get("type") == "table_row":
                        rows.append(_cell_texts(row.get("children", [])))
        return TableToken(header=header, rows=tuple(rows))

    def _block_code(self, raw: dict[str, Any]) -> Token:
        code = raw.get("raw", "")
        # Strip trailing newline added by mistune
        if code.endswith("\n"):
            code = code[:-1]
        return CodeToken(text=code)

    def _block_quote(self, raw: dict[str, Any]) -> Token:
        return BlockquoteToken(children=tuple(self._convert_tokens(raw.get("children", []))))

    def _thematic_break(self, raw: dict[str, Any]) -> Token:
        return HorizontalRuleToken()

    def _blank_line(self, raw: dict[str, Any]) -> Token:
        return SpaceToken()


_Converter = Callable[[MarkdownLexer, dict[str, Any]], Token]

_CONVERTERS: dict[str, _Converter] = {
    "heading": MarkdownLexer._heading,
    "paragraph": MarkdownLexer._paragraph,
    "block_text": MarkdownLexer._block_text,
    "list": MarkdownLexer._list,
    "list_item": MarkdownLexer._list_item,
    "task_list_item": MarkdownLexer._list_item,
    "table": MarkdownLexer._table,
    "block_code": MarkdownLexer._block_code,
    "block_quote": MarkdownLexer._block_quote,
    "thematic_break": MarkdownLexer._thematic_break,
    "blank_line": MarkdownLexer._blank_line,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _inline_text(raw: dict[str, Any]) -> str:
    return raw.get("text", "").strip(_INLINE_STRIP)


def _cell_texts(cells: list[dict[str, Any]]) -> tuple[str, ...]:
    return tuple(_inline_text(cell) for cell in cells if cell.get("type") == "table_cell")


def _raw_text(raw: dict[str, Any]) -> str:
    """Best-effort source text of an unmapped token, for diagnostics."""
    return (raw.get("raw") or raw.get("text") or "")[:200]
