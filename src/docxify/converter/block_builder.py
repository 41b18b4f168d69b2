"""Convert the block token stream into document blocks.

This module handles every block token kind:

- heading -> Heading with the literal heading text (no inline parsing)
- paragraph -> Paragraph via the inline span parser, or an image when the
  whole paragraph is a single ``![alt](url)``
- list -> ListItem blocks, delegated to lists.py
- table -> Table, delegated to tables.py
- code -> CodeBlock
- blockquote -> one BlockQuoteLine per quoted paragraph
- hr -> Rule
- image -> EmbeddedImage, or ImageFallback when the image cannot be embedded
- space -> Spacer, subject to the spacing rule below

Tokens are processed strictly in source order.  Image fetches are awaited
one at a time, so an image always lands exactly where it was referenced.

Spacing rule: when the token kind changes to ``space``, a counter of
consecutive separators is incremented and a Spacer is emitted only while
it is at most 1.  Every non-space token resets the counter.

Token kinds without a handler (top-level ``text`` and ``listitem``
tokens, and anything the lexer could not map) are skipped with an
``UNKNOWN_TOKEN`` warning.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Sequence

from docxify.config import DocxifyConfig
from docxify.converter.context import BuildContext
from docxify.converter.lists import materialize_list
from docxify.converter.spans import parse_spans
from docxify.converter.tables import build_table
from docxify.converter.tokens import (
    BlockquoteToken,
    CodeToken,
    HeadingToken,
    ImageToken,
    ListToken,
    ParagraphToken,
    SpaceToken,
    TableToken,
    Token,
)
from docxify.image.resolver import ImageResolver
from docxify.models import (
    Block,
    BlockQuoteLine,
    CodeBlock,
    ConversionWarning,
    EmbeddedImage,
    Heading,
    ImageFallback,
    ImageResolution,
    Paragraph,
    PlainText,
    Rule,
    Spacer,
)
from docxify.observability import get_logger

log = get_logger("docxify.converter")

# A paragraph consisting of exactly one image reference, optionally titled.
_IMAGE_PARAGRAPH_RE = re.compile(
    r'^!\[([^\]]*)\]\(\s*([^)\s]+)(?:\s+"([^"]*)")?\s*\)$'
)

_SPACE_KIND = SpaceToken.kind


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def build_blocks(
    tokens: Sequence[Token],
    config: DocxifyConfig,
    resolver: ImageResolver,
) -> tuple[list[Block], list[ImageResolution], list[ConversionWarning]]:
    """Convert block tokens to document blocks.

    Parameters
    ----------
    tokens:
        Block tokens in source order, as produced by
        :class:`~docxify.converter.lexer.MarkdownLexer`.
    config:
        Conversion configuration.
    resolver:
        Fetches images referenced by image tokens and image paragraphs.

    Returns
    -------
    tuple[list[Block], list[ImageResolution], list[ConversionWarning]]
        (blocks, image_resolutions, warnings)
    """
    ctx = BuildContext(config)
    previous_kind: str | None = None
    consecutive_spacers = 0

    for token in tokens:
        kind = token.kind
        log.debug("processing token", extra={"extra_fields": {"kind": kind}})

        if previous_kind is not None and previous_kind != kind and kind == _SPACE_KIND:
            consecutive_spacers += 1
            if consecutive_spacers <= 1:
                ctx.add_block(Spacer())
        if kind != _SPACE_KIND:
            consecutive_spacers = 0

        handler = _BLOCK_HANDLERS.get(kind)
        if handler is not None:
            await handler(token, ctx, resolver)
        else:
            ctx.add_warning(
                "UNKNOWN_TOKEN",
                f"Unsupported token kind '{kind}' was skipped.",
                kind=kind,
            )

        previous_kind = kind

    return ctx.blocks, ctx.images, ctx.warnings


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

async def _build_heading(token: HeadingToken, ctx: BuildContext, resolver: ImageResolver) -> None:
    level = min(max(token.depth, 1), 6)
    ctx.add_block(Heading(level=level, spans=(PlainText(token.text),)))


async def _build_paragraph(
    token: ParagraphToken, ctx: BuildContext, resolver: ImageResolver,
) -> None:
    """Build a paragraph, or an image if the paragraph is a lone image."""
    match = _IMAGE_PARAGRAPH_RE.match(token.text)
    if match is not None:
        alt_text, url, title = match.group(1), match.group(2), match.group(3) or ""
        await _embed_image(url, alt_text, title, ctx, resolver)
        return

    ctx.add_block(Paragraph(spans=tuple(parse_spans(token.text))))


async def _build_list(token: ListToken, ctx: BuildContext, resolver: ImageResolver) -> None:
    materialize_list(token.items, token.ordered, 0, ctx)


async def _build_table(token: TableToken, ctx: BuildContext, resolver: ImageResolver) -> None:
    ctx.add_block(build_table(token))


async def _build_code_block(token: CodeToken, ctx: BuildContext, resolver: ImageResolver) -> None:
    ctx.add_block(CodeBlock(text=token.text))


async def _build_block_quote(
    token: BlockquoteToken, ctx: BuildContext, resolver: ImageResolver,
) -> None:
    """Emit one quote line per quoted paragraph.

    Other quoted content (lists, code, nested quotes) is reported and
    skipped.
    """
    for child in token.children:
        if isinstance(child, ParagraphToken):
            ctx.add_block(BlockQuoteLine(spans=tuple(parse_spans(child.text))))
        elif not isinstance(child, SpaceToken):
            ctx.add_warning(
                "BLOCKQUOTE_CHILD_SKIPPED",
                f"Block quote content of kind '{child.kind}' was skipped.",
                kind=child.kind,
            )


async def _build_rule(token: Token, ctx: BuildContext, resolver: ImageResolver) -> None:
    ctx.add_block(Rule())


async def _build_image(token: ImageToken, ctx: BuildContext, resolver: ImageResolver) -> None:
    await _embed_image(token.href, token.text, token.title, ctx, resolver)


async def _skip_space(token: Token, ctx: BuildContext, resolver: ImageResolver) -> None:
    """Separators only matter to the spacing rule."""


async def _embed_image(
    url: str,
    alt_text: str,
    title: str,
    ctx: BuildContext,
    resolver: ImageResolver,
) -> None:
    """Resolve *url* and emit an embedded image or a fallback link."""
    resolution = await resolver.resolve(url)
    ctx.images.append(resolution)

    if resolution.image is not None:
        image = resolution.image
        ctx.add_block(EmbeddedImage(
            data=image.data,
            width=image.width,
            height=image.height,
            format=image.format,
            alt_text=alt_text,
            title=title,
            url=url,
        ))
        return

    ctx.add_block(ImageFallback(url=url, alt_text=alt_text))
    reason = resolution.failure.value if resolution.failure else "unknown"
    ctx.add_warning(
        "IMAGE_NOT_EMBEDDED",
        f"Image could not be embedded: {url}",
        src=url,
        reason=reason,
        detail=resolution.detail,
    )


# ---------------------------------------------------------------------------
# Block handler dispatch table
# ---------------------------------------------------------------------------

_BlockHandler = Callable[[Token, BuildContext, ImageResolver], Awaitable[None]]

_BLOCK_HANDLERS: dict[str, _BlockHandler] = {
    "heading": _build_heading,  # type: ignore[dict-item]
    "paragraph": _build_paragraph,  # type: ignore[dict-item]
    "list": _build_list,  # type: ignore[dict-item]
    "table": _build_table,  # type: ignore[dict-item]
    "code": _build_code_block,  # type: ignore[dict-item]
    "blockquote": _build_block_quote,  # type: ignore[dict-item]
    "hr": _build_rule,
    "image": _build_image,  # type: ignore[dict-item]
    "space": _skip_space,
}
