"""Tests for converter/lists.py: flattening nested lists."""

from __future__ import annotations

from docxify.config import DocxifyConfig
from docxify.converter.context import BuildContext
from docxify.converter.lists import materialize_list
from docxify.converter.tokens import ListItemToken, ListToken
from docxify.models import (
    CHECKED_GLYPH,
    FIRST_LIST_ITEM_SPACING,
    LIST_ITEM_SPACING,
    UNCHECKED_GLYPH,
    Bold,
    ListItem,
    PlainText,
)


def _materialize(items, ordered=False, **config_kwargs) -> BuildContext:
    ctx = BuildContext(DocxifyConfig(**config_kwargs))
    materialize_list(items, ordered, 0, ctx)
    return ctx


def _nested(depth: int) -> ListItemToken:
    """An item containing *depth* levels of single-item sub-lists."""
    item = ListItemToken(f"level {depth}")
    for level in range(depth - 1, -1, -1):
        item = ListItemToken(f"level {level}", children=(ListToken(items=(item,)),))
    return item


# =========================================================================
# Flat lists
# =========================================================================


class TestFlatList:
    def test_items_in_order(self):
        ctx = _materialize([ListItemToken("a"), ListItemToken("**b**")])
        assert ctx.blocks == [
            ListItem(0, False, None, (PlainText("a"),), list_id=1, index=1,
                     spacing=FIRST_LIST_ITEM_SPACING),
            ListItem(0, False, None, (Bold("b"),), list_id=1, index=2,
                     spacing=LIST_ITEM_SPACING),
        ]

    def test_ordered_flag(self):
        ctx = _materialize([ListItemToken("a")], ordered=True)
        assert ctx.blocks[0].ordered is True

    def test_separate_lists_get_separate_ids(self):
        ctx = BuildContext(DocxifyConfig())
        materialize_list([ListItemToken("a")], True, 0, ctx)
        materialize_list([ListItemToken("b")], True, 0, ctx)
        assert [b.list_id for b in ctx.blocks] == [1, 2]
        assert [b.index for b in ctx.blocks] == [1, 1]


# =========================================================================
# Task items
# =========================================================================


class TestTaskItems:
    def test_checked(self):
        ctx = _materialize([ListItemToken("Done", task=True, checked=True)])
        (item,) = ctx.blocks
        assert item.checked is True
        assert item.spans == (PlainText(CHECKED_GLYPH), PlainText("Done"))

    def test_unchecked(self):
        ctx = _materialize([ListItemToken("Todo", task=True, checked=False)])
        (item,) = ctx.blocks
        assert item.checked is False
        assert item.spans[0] == PlainText(UNCHECKED_GLYPH)

    def test_non_task_has_no_glyph(self):
        ctx = _materialize([ListItemToken("plain")])
        assert ctx.blocks[0].checked is None
        assert ctx.blocks[0].spans == (PlainText("plain"),)


# =========================================================================
# Nesting
# =========================================================================


class TestNesting:
    def test_depth_first_order(self):
        items = [
            ListItemToken("a", children=(ListToken(items=(ListItemToken("a1"), ListItemToken("a2"))),)),
            ListItemToken("b"),
        ]
        ctx = _materialize(items)
        assert [(b.level, b.spans[0].text) for b in ctx.blocks] == [
            (0, "a"), (1, "a1"), (1, "a2"), (0, "b"),
        ]

    def test_nested_ordered_numbering_restarts(self):
        nested = ListToken(items=(ListItemToken("x"), ListItemToken("y")), ordered=True)
        items = [
            ListItemToken("one"),
            ListItemToken("two"),
            ListItemToken("three", children=(nested,)),
        ]
        ctx = _materialize(items, ordered=True)
        parent = [b for b in ctx.blocks if b.level == 0]
        child = [b for b in ctx.blocks if b.level == 1]
        assert [b.index for b in parent] == [1, 2, 3]
        assert [b.index for b in child] == [1, 2]
        assert child[0].list_id != parent[0].list_id

    def test_sibling_nested_lists_get_distinct_ids(self):
        items = [
            ListItemToken("a", children=(ListToken(items=(ListItemToken("a1"),), ordered=True),)),
            ListItemToken("b", children=(ListToken(items=(ListItemToken("b1"),), ordered=True),)),
        ]
        ctx = _materialize(items, ordered=True)
        nested_ids = [b.list_id for b in ctx.blocks if b.level == 1]
        assert len(set(nested_ids)) == 2

    def test_two_sublists_in_one_item_keep_source_order(self):
        item = ListItemToken("a", children=(
            ListToken(items=(ListItemToken("first"),)),
            ListToken(items=(ListItemToken("second"),)),
        ))
        ctx = _materialize([item])
        assert [b.spans[0].text for b in ctx.blocks] == ["a", "first", "second"]

    def test_nested_items_use_regular_spacing(self):
        ctx = _materialize([_nested(1)])
        assert ctx.blocks[1].spacing == LIST_ITEM_SPACING

    def test_depth_is_capped(self):
        ctx = _materialize([_nested(5)], max_list_depth=2)
        assert [b.level for b in ctx.blocks] == [0, 1, 2, 2, 2, 2]
        assert {w.code for w in ctx.warnings} == {"NESTING_DEPTH_EXCEEDED"}

    def test_very_deep_nesting_does_not_recurse(self):
        ctx = _materialize([_nested(3000)], max_list_depth=8)
        assert len(ctx.blocks) == 3001
        assert max(b.level for b in ctx.blocks) == 8
