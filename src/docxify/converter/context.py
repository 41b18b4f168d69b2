"""Mutable accumulator for one block-building pass."""

from __future__ import annotations

from docxify.config import DocxifyConfig
from docxify.models import Block, ConversionWarning, ImageResolution
from docxify.observability import get_logger

log = get_logger("docxify.converter")


class BuildContext:
    """Blocks, warnings and list ids for a single document.

    One context is created per conversion and never shared, so concurrent
    conversions cannot interleave their output.
    """

    __slots__ = ("_next_list_id", "blocks", "config", "images", "warnings")

    def __init__(self, config: DocxifyConfig) -> None:
        self.config = config
        self.blocks: list[Block] = []
        self.warnings: list[ConversionWarning] = []
        self.images: list[ImageResolution] = []
        self._next_list_id = 0

    def add_block(self, block: Block) -> int:
        """Append a block and return its index."""
        idx = len(self.blocks)
        self.blocks.append(block)
        return idx

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))
        log.warning(message, extra={"extra_fields": {"code": code, **context}})

    def new_list_id(self) -> int:
        """Allocate the id of a new list instance."""
        self._next_list_id += 1
        return self._next_list_id
