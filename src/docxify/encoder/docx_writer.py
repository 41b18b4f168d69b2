"""Serialise a :class:`~docxify.models.DocumentModel` to ``.docx`` bytes.

The encoder is a thin adapter over python-docx.  It reads the finished,
immutable model and writes one document element per block:

- Heading -> paragraph in the ``Heading N`` style, restyled from the
  model's heading presets (size, bold, black)
- Paragraph / ListItem -> paragraph of runs, with the block's spacing
- ListItem -> numbered (one ``w:num`` per list instance, restarting at 1)
  or bulleted, indented by level
- Table -> full-width grid table with shaded header cells
- EmbeddedImage -> centred picture plus an italic caption when the image
  has alt text
- ImageFallback -> picture glyph, hyperlink and a grey marker
- BlockQuoteLine -> indented paragraph with a left border
- CodeBlock -> monospace paragraph on a shaded background
- Rule -> empty paragraph with a bottom border
- Spacer -> empty paragraph

Image bytes python-docx does not recognise are written as the fallback
link instead.  Any other failure raises
:class:`~docxify.errors.DocxifyEncodingError`; partial output is never
returned.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import (
    InvalidImageStreamError,
    UnexpectedEndOfFileError,
    UnrecognizedImageError,
)
from docx.opc.constants import RELATIONSHIP_TYPE
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Pt, RGBColor, Twips
from docx.text.paragraph import Paragraph as DocxParagraph

from docxify.errors import DocxifyEncodingError
from docxify.models import (
    BlockQuoteLine,
    Bold,
    CodeBlock,
    DocumentModel,
    EmbeddedImage,
    Heading,
    Hyperlink,
    ImageFallback,
    InlineCode,
    Italic,
    ListItem,
    Paragraph,
    Rule,
    Spacer,
    Span,
    Spacing,
    Strikethrough,
    Table,
)
from docxify.observability import get_logger

log = get_logger("docxify.encoder")

HYPERLINK_COLOR = "0563C1"
CAPTION_COLOR = "666666"
MARKER_COLOR = "999999"
BORDER_COLOR = "AAAAAA"
CODE_SHADING = "F5F5F5"
HEADER_SHADING = "EEEEEE"
SMALL_TEXT_SIZE = 20

QUOTE_INDENT = 720
LIST_INDENT_STEP = 720
LIST_HANGING = 360

EMU_PER_PIXEL = 9525

_BULLET_GLYPHS = ("•", "◦", "▪")
_BULLET_LEVELS = 9

_CODE_SPACING = Spacing(80, 80, 300)
_RULE_SPACING = Spacing(120, 120, 240)
_CELL_SPACING = Spacing(40, 40, 240)

# python-docx raises these for bytes it cannot parse as a picture.
_UNREADABLE_IMAGE_ERRORS = (
    UnrecognizedImageError,
    UnexpectedEndOfFileError,
    InvalidImageStreamError,
)


def encode_document(model: DocumentModel) -> bytes:
    """Encode *model* as a ``.docx`` file.

    Raises
    ------
    DocxifyEncodingError
        If python-docx cannot build or save the document.  The original
        diagnostic is kept as the error message and ``cause``.
    """
    try:
        writer = _DocxWriter(model)
    except Exception as exc:
        raise DocxifyEncodingError(
            f"Could not initialise document: {exc}",
            context={"blocks": len(model.blocks)},
            cause=exc,
        ) from exc

    for index, block in enumerate(model.blocks):
        try:
            writer.write(block)
        except Exception as exc:
            raise DocxifyEncodingError(
                str(exc) or type(exc).__name__,
                context={
                    "blocks": len(model.blocks),
                    "block_index": index,
                    "block_type": type(block).__name__,
                },
                cause=exc,
            ) from exc

    try:
        content = writer.save()
    except Exception as exc:
        raise DocxifyEncodingError(
            f"Could not save document: {exc}",
            context={"blocks": len(model.blocks)},
            cause=exc,
        ) from exc

    log.debug(
        "document encoded",
        extra={"extra_fields": {"blocks": len(model.blocks), "bytes": len(content)}},
    )
    return content


class _DocxWriter:
    """Stateful writer for one document; not reusable."""

    def __init__(self, model: DocumentModel) -> None:
        self._model = model
        self._doc = Document()
        self._numbering = self._doc.part.numbering_part.element
        self._ordered_abstract_id = -1
        self._bullet_num_id = -1
        self._list_num_ids: dict[int, int] = {}

        self._apply_styles()
        self._define_numbering()
        if model.title:
            self._doc.core_properties.title = model.title

    def write(self, block: Any) -> None:
        handler = _BLOCK_WRITERS.get(type(block))
        if handler is None:
            raise TypeError(f"cannot encode block of type {type(block).__name__}")
        handler(self, block)

    def save(self) -> bytes:
        buffer = io.BytesIO()
        self._doc.save(buffer)
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Document setup
    # ------------------------------------------------------------------

    def _apply_styles(self) -> None:
        body = self._model.body
        normal = self._doc.styles["Normal"]
        normal.font.name = body.font
        normal.font.size = _half_points(body.size)
        normal.font.color.rgb = RGBColor.from_string(body.color)

        for preset in self._model.heading_styles:
            style = self._doc.styles[f"Heading {preset.level}"]
            style.font.name = preset.font
            style.font.size = _half_points(preset.size)
            style.font.bold = preset.bold
            style.font.italic = False
            style.font.color.rgb = RGBColor.from_string(preset.color)
            style.paragraph_format.space_before = Twips(preset.space_before)
            style.paragraph_format.space_after = Twips(preset.space_after)

    def _define_numbering(self) -> None:
        """Add the ordered and bullet abstract numbering definitions."""
        next_id = self._next_abstract_id()

        ordered_levels = [
            (lvl.level, lvl.format, lvl.text, lvl.indent_left, lvl.hanging)
            for lvl in self._model.numbering
        ]
        self._ordered_abstract_id = next_id
        self._insert_abstract_num(next_id, ordered_levels)

        bullet_levels = [
            (
                level,
                "bullet",
                _BULLET_GLYPHS[level % len(_BULLET_GLYPHS)],
                LIST_INDENT_STEP * (level + 1),
                LIST_HANGING,
            )
            for level in range(_BULLET_LEVELS)
        ]
        self._insert_abstract_num(next_id + 1, bullet_levels)
        self._bullet_num_id = self._numbering.add_num(next_id + 1).numId

    def _next_abstract_id(self) -> int:
        existing = [
            int(el.get(qn("w:abstractNumId")))
            for el in self._numbering.findall(qn("w:abstractNum"))
        ]
        return max(existing, default=-1) + 1

    def _insert_abstract_num(
        self,
        abstract_id: int,
        levels: list[tuple[int, str, str, int, int]],
    ) -> None:
        abstract = _element("w:abstractNum", abstractNumId=abstract_id)
        abstract.append(_element("w:multiLevelType", val="hybridMultilevel"))
        for level, fmt, text, indent_left, hanging in levels:
            lvl = _element("w:lvl", ilvl=level)
            lvl.append(_element("w:start", val=1))
            lvl.append(_element("w:numFmt", val=fmt))
            lvl.append(_element("w:lvlText", val=text))
            lvl.append(_element("w:lvlJc", val="left"))
            p_pr = OxmlElement("w:pPr")
            p_pr.append(_element("w:ind", left=indent_left, hanging=hanging))
            lvl.append(p_pr)
            abstract.append(lvl)

        # abstractNum definitions must precede every w:num.
        first_num = self._numbering.find(qn("w:num"))
        if first_num is not None:
            first_num.addprevious(abstract)
        else:
            self._numbering.append(abstract)

    def _ordered_num_id(self, list_id: int) -> int:
        """Return the ``w:num`` of a list instance, creating it on first use."""
        num_id = self._list_num_ids.get(list_id)
        if num_id is None:
            num = self._numbering.add_num(self._ordered_abstract_id)
            for level in range(len(self._model.numbering)):
                num.add_lvlOverride(ilvl=level).add_startOverride(1)
            num_id = num.numId
            self._list_num_ids[list_id] = num_id
        return num_id

    # ------------------------------------------------------------------
    # Block writers
    # ------------------------------------------------------------------

    def _write_heading(self, block: Heading) -> None:
        level = min(max(block.level, 1), 6)
        paragraph = self._doc.add_paragraph(style=f"Heading {level}")
        self._add_spans(paragraph, block.spans)

    def _write_paragraph(self, block: Paragraph) -> None:
        paragraph = self._doc.add_paragraph()
        _set_spacing(paragraph, block.spacing)
        self._add_spans(paragraph, block.spans)

    def _write_list_item(self, block: ListItem) -> None:
        paragraph = self._doc.add_paragraph()
        _set_spacing(paragraph, block.spacing)

        if block.ordered:
            ilvl = min(block.level, len(self._model.numbering) - 1)
            num_id = self._ordered_num_id(block.list_id)
        else:
            ilvl = min(block.level, _BULLET_LEVELS - 1)
            num_id = self._bullet_num_id
        num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
        num_pr.get_or_add_ilvl().val = ilvl
        num_pr.get_or_add_numId().val = num_id

        # Explicit indent keeps levels past the numbering definition apart.
        paragraph.paragraph_format.left_indent = Twips(LIST_INDENT_STEP * (block.level + 1))
        paragraph.paragraph_format.first_line_indent = Twips(-LIST_HANGING)
        self._add_spans(paragraph, block.spans)

    def _write_table(self, block: Table) -> None:
        columns = max([block.column_count, *(len(row) for row in block.rows)])
        if columns == 0:
            return
        table = self._doc.add_table(rows=1 + len(block.rows), cols=columns)
        table.style = self._doc.styles["Table Grid"]
        _set_table_full_width(table)

        all_rows = [block.header_cells, *block.rows]
        for row_index, cells in enumerate(all_rows):
            docx_row = table.rows[row_index]
            for col_index, spans in enumerate(cells):
                cell = docx_row.cells[col_index]
                paragraph = cell.paragraphs[0]
                _set_spacing(paragraph, _CELL_SPACING)
                self._add_spans(paragraph, spans)
                if row_index == 0:
                    _set_cell_shading(cell, HEADER_SHADING)

    def _write_image(self, block: EmbeddedImage) -> None:
        paragraph = self._doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        try:
            paragraph.add_run().add_picture(
                io.BytesIO(block.data),
                width=Emu(block.width * EMU_PER_PIXEL),
                height=Emu(block.height * EMU_PER_PIXEL),
            )
        except _UNREADABLE_IMAGE_ERRORS as exc:
            log.warning(
                "image bytes not recognised, writing link instead",
                extra={"extra_fields": {
                    "format": block.format.value,
                    "bytes": len(block.data),
                    "error": type(exc).__name__,
                }},
            )
            # Drop the empty run left behind by the failed picture.
            for run in list(paragraph.runs):
                paragraph._p.remove(run._r)
            paragraph.alignment = None
            _set_spacing(paragraph, Spacing())
            self._add_fallback_spans(paragraph, ImageFallback(url=block.url, alt_text=block.alt_text))
            return

        if block.alt_text:
            caption = self._doc.add_paragraph()
            caption.alignment = WD_ALIGN_PARAGRAPH.CENTER
            run = caption.add_run(block.alt_text)
            run.italic = True
            run.font.size = _half_points(SMALL_TEXT_SIZE)
            run.font.color.rgb = RGBColor.from_string(CAPTION_COLOR)

    def _write_image_fallback(self, block: ImageFallback) -> None:
        paragraph = self._doc.add_paragraph()
        _set_spacing(paragraph, Spacing())
        self._add_fallback_spans(paragraph, block)

    def _write_quote_line(self, block: BlockQuoteLine) -> None:
        paragraph = self._doc.add_paragraph()
        _set_spacing(paragraph, Spacing())
        paragraph.paragraph_format.left_indent = Twips(QUOTE_INDENT)
        _set_paragraph_border(paragraph, "left", size=15, space=15)
        self._add_spans(paragraph, block.spans)

    def _write_code_block(self, block: CodeBlock) -> None:
        paragraph = self._doc.add_paragraph()
        _set_spacing(paragraph, _CODE_SPACING)
        _set_paragraph_shading(paragraph, CODE_SHADING)
        run = paragraph.add_run(block.text)
        run.font.name = self._model.code_font
        run.font.size = _half_points(self._model.code_size)

    def _write_rule(self, block: Rule) -> None:
        paragraph = self._doc.add_paragraph()
        _set_spacing(paragraph, _RULE_SPACING)
        _set_paragraph_border(paragraph, "bottom", size=1, space=1)

    def _write_spacer(self, block: Spacer) -> None:
        self._doc.add_paragraph()

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def _add_spans(self, paragraph: DocxParagraph, spans: tuple[Span, ...]) -> None:
        for span in spans:
            if isinstance(span, Hyperlink):
                self._add_hyperlink(paragraph, span.text, span.url)
                continue
            if not span.text:
                continue
            run = paragraph.add_run(span.text)
            if isinstance(span, Bold):
                run.bold = True
            elif isinstance(span, Italic):
                run.italic = True
            elif isinstance(span, Strikethrough):
                run.font.strike = True
            elif isinstance(span, InlineCode):
                run.font.name = self._model.code_font

    def _add_fallback_spans(self, paragraph: DocxParagraph, block: ImageFallback) -> None:
        glyph, link, marker = block.spans
        paragraph.add_run(glyph.text)
        self._add_hyperlink(paragraph, link.text, link.url)
        run = paragraph.add_run(marker.text)
        run.font.size = _half_points(SMALL_TEXT_SIZE)
        run.font.color.rgb = RGBColor.from_string(MARKER_COLOR)

    def _add_hyperlink(self, paragraph: DocxParagraph, text: str, url: str) -> None:
        rel_id = paragraph.part.relate_to(url, RELATIONSHIP_TYPE.HYPERLINK, is_external=True)

        hyperlink = OxmlElement("w:hyperlink")
        hyperlink.set(qn("r:id"), rel_id)

        run = OxmlElement("w:r")
        r_pr = OxmlElement("w:rPr")
        r_pr.append(_element("w:color", val=HYPERLINK_COLOR))
        r_pr.append(_element("w:u", val="single"))
        run.append(r_pr)

        text_el = OxmlElement("w:t")
        text_el.text = text
        text_el.set(qn("xml:space"), "preserve")
        run.append(text_el)

        hyperlink.append(run)
        paragraph._p.append(hyperlink)


_BLOCK_WRITERS: dict[type, Callable[[_DocxWriter, Any], None]] = {
    Heading: _DocxWriter._write_heading,
    Paragraph: _DocxWriter._write_paragraph,
    ListItem: _DocxWriter._write_list_item,
    Table: _DocxWriter._write_table,
    EmbeddedImage: _DocxWriter._write_image,
    ImageFallback: _DocxWriter._write_image_fallback,
    BlockQuoteLine: _DocxWriter._write_quote_line,
    CodeBlock: _DocxWriter._write_code_block,
    Rule: _DocxWriter._write_rule,
    Spacer: _DocxWriter._write_spacer,
}


# ---------------------------------------------------------------------------
# OOXML helpers
# ---------------------------------------------------------------------------

def _element(tag: str, **attrs: object) -> Any:
    """Create a ``w:`` element with ``w:``-qualified attributes."""
    el = OxmlElement(tag)
    for name, value in attrs.items():
        el.set(qn(f"w:{name}"), str(value))
    return el


def _half_points(size: int) -> Pt:
    return Pt(size / 2)


def _set_spacing(paragraph: DocxParagraph, spacing: Spacing) -> None:
    fmt = paragraph.paragraph_format
    fmt.space_before = Twips(spacing.before)
    fmt.space_after = Twips(spacing.after)
    fmt.line_spacing = spacing.line / 240


# Schema order of the w:pPr children that may follow w:pBdr and w:shd.
_PPR_AFTER_SHD = (
    "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
    "w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
    "w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr",
    "w:pPrChange",
)
_PPR_AFTER_PBDR = ("w:shd", *_PPR_AFTER_SHD)
_TCPR_AFTER_SHD = (
    "w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign", "w:hideMark",
)
_TBLPR_AFTER_TBLW = (
    "w:jc", "w:tblCellSpacing", "w:tblInd", "w:tblBorders", "w:shd",
    "w:tblLayout", "w:tblCellMar", "w:tblLook", "w:tblCaption",
    "w:tblDescription", "w:tblPrChange",
)


def _set_paragraph_border(paragraph: DocxParagraph, side: str, size: int, space: int) -> None:
    borders = OxmlElement("w:pBdr")
    borders.append(_element(f"w:{side}", val="single", sz=size, space=space, color=BORDER_COLOR))
    paragraph._p.get_or_add_pPr().insert_element_before(borders, *_PPR_AFTER_PBDR)


def _set_paragraph_shading(paragraph: DocxParagraph, fill: str) -> None:
    shading = _element("w:shd", val="clear", color="auto", fill=fill)
    paragraph._p.get_or_add_pPr().insert_element_before(shading, *_PPR_AFTER_SHD)


def _set_cell_shading(cell: Any, fill: str) -> None:
    shading = _element("w:shd", val="clear", color="auto", fill=fill)
    cell._tc.get_or_add_tcPr().insert_element_before(shading, *_TCPR_AFTER_SHD)


def _set_table_full_width(table: Any) -> None:
    tbl_pr = table._tbl.tblPr
    for existing in tbl_pr.findall(qn("w:tblW")):
        tbl_pr.remove(existing)
    # pct widths are in fiftieths of a percent.
    tbl_pr.insert_element_before(_element("w:tblW", w=5000, type="pct"), *_TBLPR_AFTER_TBLW)
