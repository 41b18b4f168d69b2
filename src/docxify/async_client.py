"""Asynchronous docxify client.

:class:`AsyncDocxifyClient` bundles a configuration, one shared
:class:`httpx.AsyncClient` for image fetches, the conversion pipeline and
the ``.docx`` encoder.

Usage::

    import asyncio
    from pathlib import Path

    from docxify import AsyncDocxifyClient

    async def main():
        async with AsyncDocxifyClient() as client:
            result = await client.render("# Hello\\n\\nWorld", name="Notes")
            Path("notes.docx").write_bytes(result.content)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from typing import Any

import httpx

from docxify.config import DocxifyConfig
from docxify.converter.md_to_docx import MarkdownToDocxConverter
from docxify.encoder import encode_document
from docxify.errors import DocxifyEncodingError, DocxifyValidationError
from docxify.image.resolver import ImageResolver
from docxify.models import ConversionResult, RenderRequest, RenderResult
from docxify.observability import NoopMetricsHook, get_logger

log = get_logger("docxify.client")


class AsyncDocxifyClient:
    """Asynchronous Markdown-to-``.docx`` client.

    Parameters
    ----------
    http_client:
        Optional existing :class:`httpx.AsyncClient` for image fetches.
        When omitted the client creates one and closes it in
        :meth:`close`.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`DocxifyConfig`.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None, **kwargs: Any) -> None:
        """Create client.  All kwargs are forwarded to DocxifyConfig."""
        self._config = DocxifyConfig(**kwargs)
        self._resolver = ImageResolver(self._config, client=http_client)
        self._converter = MarkdownToDocxConverter(self._config, self._resolver)
        self._metrics = self._config.metrics or NoopMetricsHook()

    @property
    def config(self) -> DocxifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    async def convert(self, markdown: str, name: str | None = None) -> ConversionResult:
        """Convert Markdown to a document model without encoding it.

        Parameters
        ----------
        markdown:
            Raw Markdown text.
        name:
            Optional title stored on the document model.
        """
        return await self._converter.convert(markdown, title=name)

    async def render(self, markdown: str, name: str | None = None) -> RenderResult:
        """Convert Markdown and encode it as a ``.docx`` document.

        Parameters
        ----------
        markdown:
            Raw Markdown text.  Must not be empty.
        name:
            Display name of the document; ``config.default_document_name``
            when omitted.

        Returns
        -------
        RenderResult

        Raises
        ------
        DocxifyValidationError
            If *markdown* is empty.
        DocxifyEncodingError
            If the document cannot be encoded, or encodes to no bytes.
        """
        if not markdown:
            raise DocxifyValidationError(
                "Markdown content is required",
                context={"field": "markdown", "name": name},
            )
        effective_name = name or self._config.default_document_name

        conversion = await self.convert(markdown, name=effective_name)

        start = time.monotonic()
        content = encode_document(conversion.document)
        self._metrics.timing("docxify.encode_duration_ms", (time.monotonic() - start) * 1000)

        if not content:
            raise DocxifyEncodingError(
                "Generated document is empty",
                context={"name": effective_name, "blocks": len(conversion.document.blocks)},
            )
        self._metrics.gauge("docxify.document_size_bytes", len(content))

        log.info(
            "document rendered",
            extra={"extra_fields": {
                "name": effective_name,
                "bytes": len(content),
                "blocks": len(conversion.document.blocks),
                "warnings": len(conversion.warnings),
            }},
        )
        return RenderResult(
            name=effective_name,
            content=content,
            blocks=len(conversion.document.blocks),
            warnings=conversion.warnings,
        )

    async def render_many(
        self,
        requests: Iterable[RenderRequest],
    ) -> list[RenderResult | Exception]:
        """Render independent documents concurrently.

        Each request is rendered with its own block list.  A failure is
        isolated to its request: the returned list holds, in request
        order, either the :class:`RenderResult` or the exception that
        failed that request.
        """
        requests = list(requests)
        outcomes = await asyncio.gather(
            *(self.render(req.markdown, req.name) for req in requests),
            return_exceptions=True,
        )

        results: list[RenderResult | Exception] = []
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                log.error(
                    "batch render failed",
                    extra={"extra_fields": {
                        "index": index,
                        "name": requests[index].name,
                        "error": type(outcome).__name__,
                        "detail": str(outcome),
                    }},
                )
            results.append(outcome)
        return results

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client used for image fetches."""
        await self._resolver.aclose()

    async def __aenter__(self) -> AsyncDocxifyClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
