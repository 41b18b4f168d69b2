"""Full Markdown-to-document-model conversion pipeline.

:class:`MarkdownToDocxConverter` runs the three stages of a conversion:

1. **Lex**: :class:`MarkdownLexer` turns raw Markdown into block tokens.
2. **Build**: :func:`build_blocks` turns the tokens into document blocks,
   resolving images and collecting :class:`ConversionWarning` values.
3. **Assemble**: :func:`assemble_document` bundles the blocks with the
   configured style presets.

The result is a :class:`ConversionResult` ready to be handed to
:func:`~docxify.encoder.encode_document`.
"""

from __future__ import annotations

import dataclasses
import json
import sys
import time

from docxify.config import DocxifyConfig
from docxify.converter.assembler import assemble_document
from docxify.converter.block_builder import build_blocks
from docxify.converter.lexer import MarkdownLexer
from docxify.converter.tokens import Token
from docxify.image.resolver import ImageResolver
from docxify.models import ConversionResult
from docxify.observability import NoopMetricsHook, get_logger

log = get_logger("docxify.converter")

_WRAPPER_OPENINGS = ("```markdown\n", "```\n")
_WRAPPER_CLOSING = "```"


def strip_code_wrapper(markdown: str) -> str:
    """Remove a fence that wraps the whole document.

    Only a leading ```` ```markdown ```` or bare ```` ``` ```` line paired
    with a trailing ```` ``` ```` is removed; anything else is returned
    unchanged.
    """
    for opening in _WRAPPER_OPENINGS:
        if (
            markdown.startswith(opening)
            and markdown.endswith(_WRAPPER_CLOSING)
            and len(markdown) >= len(opening) + len(_WRAPPER_CLOSING)
        ):
            log.debug("removing code block wrapper", extra={"extra_fields": {"opening": opening.strip()}})
            return markdown[len(opening):-len(_WRAPPER_CLOSING)]
    return markdown


class MarkdownToDocxConverter:
    """Convert Markdown text to a :class:`~docxify.models.DocumentModel`.

    Parameters
    ----------
    config:
        Conversion configuration.
    resolver:
        Image resolver used for every image in the document.  The
        converter does not close it.

    Examples
    --------
    >>> async with ImageResolver(config) as resolver:
    ...     converter = MarkdownToDocxConverter(config, resolver)
    ...     result = await converter.convert("# Title\\n\\nHello **world**")
    >>> [type(b).__name__ for b in result.document.blocks]
    ['Heading', 'Paragraph']
    """

    def __init__(self, config: DocxifyConfig, resolver: ImageResolver) -> None:
        self._config = config
        self._resolver = resolver
        self._lexer = MarkdownLexer()
        self._metrics = config.metrics or NoopMetricsHook()

    async def convert(self, markdown: str, title: str | None = None) -> ConversionResult:
        """Full pipeline: lex -> build blocks -> assemble.

        Parameters
        ----------
        markdown:
            Raw Markdown text to convert.
        title:
            Optional title stored on the document model.

        Returns
        -------
        ConversionResult
            The immutable document model plus the warnings and image
            resolutions collected while building it.
        """
        start = time.monotonic()

        if self._config.strip_code_wrapper:
            markdown = strip_code_wrapper(markdown)

        tokens = self._lexer.lex(markdown)

        if self._config.debug_dump_tokens:
            print(
                "[docxify] Token stream:",
                json.dumps([_dump_token(t) for t in tokens], indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        blocks, images, warnings = await build_blocks(tokens, self._config, self._resolver)
        document = assemble_document(blocks, self._config.style, title=title)

        embedded = sum(1 for image in images if image.embeddable)
        elapsed_ms = (time.monotonic() - start) * 1000
        self._metrics.increment("docxify.blocks_created_total", len(document.blocks))
        self._metrics.increment("docxify.images_embedded_total", embedded)
        self._metrics.increment("docxify.images_fallback_total", len(images) - embedded)
        self._metrics.increment("docxify.conversion_warnings_total", len(warnings))
        self._metrics.timing("docxify.conversion_duration_ms", elapsed_ms)

        log.info(
            "conversion finished",
            extra={"extra_fields": {
                "tokens": len(tokens),
                "blocks": len(document.blocks),
                "images": len(images),
                "warnings": len(warnings),
                "duration_ms": round(elapsed_ms, 2),
            }},
        )
        return ConversionResult(document=document, warnings=warnings, images=images)


def _dump_token(token: Token) -> dict:
    return {"kind": token.kind, **dataclasses.asdict(token)}
