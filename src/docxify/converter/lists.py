"""Flatten (possibly nested) lists into ordered list-item blocks.

A Markdown list is a tree; the document model is flat.  Each item becomes
one :class:`~docxify.models.ListItem` carrying its nesting ``level``, and
a nested list is emitted immediately after the item that contains it,
before that item's next sibling (depth-first).

Every list instance, nested or not, gets its own ``list_id`` and numbers
its items from 1, so an ordered sub-list never continues its parent's
numbering.

The walk uses an explicit stack, so arbitrarily deep token trees cannot
exhaust the interpreter stack.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from docxify.converter.context import BuildContext
from docxify.converter.spans import parse_spans
from docxify.converter.tokens import ListItemToken, ListToken
from docxify.models import (
    CHECKED_GLYPH,
    FIRST_LIST_ITEM_SPACING,
    LIST_ITEM_SPACING,
    UNCHECKED_GLYPH,
    ListItem,
    PlainText,
    Span,
)


@dataclass
class _ListFrame:
    items: Iterator[tuple[int, ListItemToken]]
    ordered: bool
    level: int
    list_id: int


def materialize_list(
    items: Sequence[ListItemToken],
    ordered: bool,
    level: int,
    ctx: BuildContext,
) -> None:
    """Append a list's items, and those of its sub-lists, to ``ctx.blocks``.

    Parameters
    ----------
    items:
        The list's items in source order.
    ordered:
        Whether this list is numbered.
    level:
        Nesting depth of this list, ``0`` for a top-level list.  Depths
        beyond ``config.max_list_depth`` are clamped to it.
    ctx:
        The build context receiving the blocks.
    """
    stack = [_new_frame(items, ordered, level, ctx)]

    while stack:
        frame = stack[-1]
        entry = next(frame.items, None)
        if entry is None:
            stack.pop()
            continue

        index, item = entry
        ctx.add_block(ListItem(
            level=frame.level,
            ordered=frame.ordered,
            checked=item.checked if item.task else None,
            spans=tuple(_item_spans(item)),
            list_id=frame.list_id,
            index=index,
            spacing=(
                FIRST_LIST_ITEM_SPACING
                if frame.level == 0 and index == 1
                else LIST_ITEM_SPACING
            ),
        ))

        nested = [
            _new_frame(child.items, child.ordered, frame.level + 1, ctx)
            for child in item.children
            if isinstance(child, ListToken)
        ]
        # Topmost frame runs first, so push in reverse source order.
        stack.extend(reversed(nested))


def _new_frame(
    items: Sequence[ListItemToken],
    ordered: bool,
    level: int,
    ctx: BuildContext,
) -> _ListFrame:
    max_depth = ctx.config.max_list_depth
    if level > max_depth:
        ctx.add_warning(
            "NESTING_DEPTH_EXCEEDED",
            f"List nesting exceeds {max_depth} levels; items kept at level {max_depth}.",
            depth=level,
        )
        level = max_depth
    return _ListFrame(
        items=iter(enumerate(items, start=1)),
        ordered=ordered,
        level=level,
        list_id=ctx.new_list_id(),
    )


def _item_spans(item: ListItemToken) -> list[Span]:
    spans: list[Span] = []
    if item.task:
        spans.append(PlainText(CHECKED_GLYPH if item.checked else UNCHECKED_GLYPH))
    spans.extend(parse_spans(item.text))
    return spans
