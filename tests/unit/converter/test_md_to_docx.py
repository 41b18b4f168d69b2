"""End-to-end tests for MarkdownToDocxConverter (Markdown -> DocumentModel)."""

from __future__ import annotations

import pytest

from docxify.config import DocxifyConfig
from docxify.converter.md_to_docx import MarkdownToDocxConverter, strip_code_wrapper
from docxify.models import (
    CHECKED_GLYPH,
    NOT_EMBEDDED_MARKER,
    BlockQuoteLine,
    Bold,
    CodeBlock,
    EmbeddedImage,
    Heading,
    Hyperlink,
    ImageFallback,
    ListItem,
    Paragraph,
    PlainText,
    Rule,
    Spacer,
    Table,
)

# =========================================================================
# Core conversions
# =========================================================================


class TestConvert:
    @pytest.mark.asyncio
    async def test_title_and_paragraph(self, converter):
        result = await converter.convert("# Title\n\nHello **world**")
        assert result.document.blocks == (
            Heading(1, (PlainText("Title"),)),
            Paragraph((PlainText("Hello "), Bold("world"))),
        )
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_checked_task_item(self, converter):
        result = await converter.convert("- [x] Done")
        (item,) = result.document.blocks
        assert isinstance(item, ListItem)
        assert item.checked is True
        assert item.spans == (PlainText(CHECKED_GLYPH), PlainText("Done"))

    @pytest.mark.asyncio
    async def test_nested_ordered_list_restarts(self, converter):
        md = "1. one\n2. two\n3. three\n   1. sub a\n   2. sub b\n"
        result = await converter.convert(md)
        items = result.document.blocks
        assert [(b.level, b.index) for b in items] == [(0, 1), (0, 2), (0, 3), (1, 1), (1, 2)]
        assert items[3].list_id != items[0].list_id

    @pytest.mark.asyncio
    async def test_failed_image_becomes_fallback(self, converter, image_server):
        result = await converter.convert("![Chart](https://img.test/chart.png)")
        (block,) = result.document.blocks
        assert isinstance(block, ImageFallback)
        assert Hyperlink("Chart", "https://img.test/chart.png") in block.spans
        assert block.spans[-1] == PlainText(NOT_EMBEDDED_MARKER)
        assert [w.code for w in result.warnings] == ["IMAGE_NOT_EMBEDDED"]

    @pytest.mark.asyncio
    async def test_embedded_image(self, converter, image_server):
        image_server.add_image("https://img.test/chart.png")
        result = await converter.convert("![Chart](https://img.test/chart.png)")
        (block,) = result.document.blocks
        assert isinstance(block, EmbeddedImage)
        assert result.images[0].embeddable

    @pytest.mark.asyncio
    async def test_mixed_document(self, converter):
        md = (
            "# Report\n"
            "\n"
            "Intro with `code`.\n"
            "\n"
            "> quoted\n"
            "\n"
            "```\n"
            "raw **text**\n"
            "```\n"
            "\n"
            "---\n"
            "\n"
            "| A | B |\n"
            "|---|---|\n"
            "| 1 | 2 |\n"
        )
        result = await converter.convert(md)
        kinds = [type(b) for b in result.document.blocks]
        assert kinds == [
            Heading, Paragraph, Spacer, BlockQuoteLine, Spacer, CodeBlock, Spacer, Rule, Table,
        ]
        code = result.document.blocks[5]
        assert code.text == "raw **text**"

    @pytest.mark.asyncio
    async def test_title_is_stored(self, converter):
        result = await converter.convert("text", title="Notes")
        assert result.document.title == "Notes"

    @pytest.mark.asyncio
    async def test_each_conversion_is_independent(self, converter):
        first = await converter.convert("1. a\n")
        second = await converter.convert("1. a\n")
        assert first.document.blocks == second.document.blocks


# =========================================================================
# Code wrapper stripping
# =========================================================================


class TestStripCodeWrapper:
    def test_markdown_fence(self):
        assert strip_code_wrapper("```markdown\n# Hi\n```") == "# Hi\n"

    def test_bare_fence(self):
        assert strip_code_wrapper("```\n# Hi\n```") == "# Hi\n"

    def test_other_language_untouched(self):
        text = "```python\nx = 1\n```"
        assert strip_code_wrapper(text) == text

    def test_unwrapped_untouched(self):
        assert strip_code_wrapper("# Hi") == "# Hi"

    @pytest.mark.asyncio
    async def test_wrapper_removed_before_lexing(self, converter):
        result = await converter.convert("```markdown\n# Hi\n```")
        assert result.document.blocks == (Heading(1, (PlainText("Hi"),)),)

    @pytest.mark.asyncio
    async def test_wrapper_kept_when_disabled(self, resolver):
        converter = MarkdownToDocxConverter(DocxifyConfig(strip_code_wrapper=False), resolver)
        result = await converter.convert("```markdown\n# Hi\n```")
        assert result.document.blocks == (CodeBlock("# Hi"),)


# =========================================================================
# Debug output
# =========================================================================


class TestDebugDump:
    @pytest.mark.asyncio
    async def test_tokens_dumped_to_stderr(self, resolver, capsys):
        converter = MarkdownToDocxConverter(DocxifyConfig(debug_dump_tokens=True), resolver)
        await converter.convert("# Hi")
        err = capsys.readouterr().err
        assert "[docxify] Token stream:" in err
        assert '"kind": "heading"' in err
