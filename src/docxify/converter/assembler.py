"""Bundle finished blocks with style presets into a document model.

:func:`assemble_document` is pure: it copies the block sequence into an
immutable tuple and attaches the numbering, heading and body presets
from a :class:`~docxify.config.StyleConfig`.  It never touches the
encoder.
"""

from __future__ import annotations

from collections.abc import Sequence

from docxify.config import StyleConfig
from docxify.models import Block, DocumentModel


def assemble_document(
    blocks: Sequence[Block],
    style: StyleConfig | None = None,
    title: str | None = None,
) -> DocumentModel:
    """Build a :class:`DocumentModel` from *blocks*.

    Parameters
    ----------
    blocks:
        Blocks in final render order.  The sequence is copied, not
        mutated.
    style:
        Style presets; the defaults of :class:`StyleConfig` when omitted.
    title:
        Optional document title written to the core properties.
    """
    style = style or StyleConfig()
    return DocumentModel(
        blocks=tuple(blocks),
        numbering=style.numbering,
        heading_styles=style.headings,
        body=style.body,
        code_font=style.code_font,
        code_size=style.code_size,
        title=title,
    )
