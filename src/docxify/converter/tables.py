"""Table conversion: table token to :class:`~docxify.models.Table` block.

Builds a table block from the :class:`~docxify.converter.tokens.TableToken`
produced by the lexer.  The token looks like::

    TableToken(
        header=("Name", "**Role**"),
        rows=(("Ada", "`admin`"), ("Linus", "[site](https://x.org)")),
    )

Every header and data cell is run through
:func:`~docxify.converter.spans.parse_spans` on its own, so cells support
the same inline formatting as paragraphs.  The column count is the
header length; data rows are neither padded nor truncated.  Header cells
are shaded by the encoder, which is the only place the two kinds of cell
differ.
"""

from __future__ import annotations

from collections.abc import Sequence

from docxify.converter.spans import parse_spans
from docxify.converter.tokens import TableToken
from docxify.models import Span, Table


def build_table(token: TableToken) -> Table:
    """Build a table block from a table token."""
    return Table(
        header_cells=_build_row_cells(token.header),
        rows=tuple(_build_row_cells(row) for row in token.rows),
    )


def _build_row_cells(cells: Sequence[str]) -> tuple[tuple[Span, ...], ...]:
    """Parse each raw cell text into its own span sequence."""
    return tuple(tuple(parse_spans(cell)) for cell in cells)
