"""Fetch images for embedding, failing soft.

:class:`ImageResolver` turns an image URL into an
:class:`~docxify.models.ImageResolution`.  It never raises: every failure
(an SVG, a non-success status, a transport error) comes back as a
resolution with ``failure`` set, and the caller renders a fallback link
instead of the picture.

Each URL gets exactly one attempt; there is no retry or backoff.
"""

from __future__ import annotations

from typing import Any

import httpx

from docxify.config import DocxifyConfig
from docxify.image.detect import detect_image_format, is_svg_content_type, is_svg_url
from docxify.models import FetchedImage, ImageFailure, ImageResolution
from docxify.observability import get_logger

log = get_logger("docxify.image")


class ImageResolver:
    """Resolve image URLs through a shared :class:`httpx.AsyncClient`.

    Parameters
    ----------
    config:
        Supplies the fixed image dimensions and HTTP settings.
    client:
        An existing client to reuse.  When omitted the resolver creates
        one and closes it in :meth:`aclose`.
    """

    def __init__(
        self,
        config: DocxifyConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        if client is None:
            client_kwargs: dict[str, Any] = {
                "timeout": httpx.Timeout(config.timeout_seconds),
                "follow_redirects": True,
                "headers": {"User-Agent": config.user_agent},
            }
            if config.http_proxy:
                client_kwargs["proxy"] = config.http_proxy
            client = httpx.AsyncClient(**client_kwargs)
        self._client = client

    async def resolve(self, url: str) -> ImageResolution:
        """Fetch and classify the image at *url*.

        Returns
        -------
        ImageResolution
            With ``image`` set on success, or ``failure`` set to the
            reason the image cannot be embedded.
        """
        if not url:
            return self._fail(url, ImageFailure.FETCH_ERROR, "empty image URL")

        if is_svg_url(url):
            return self._fail(url, ImageFailure.SVG_SUFFIX, "SVG images are not embedded")

        try:
            response = await self._client.get(url)
            if not response.is_success:
                return self._fail(
                    url,
                    ImageFailure.HTTP_STATUS,
                    f"{response.status_code} {response.reason_phrase}",
                )

            content_type = response.headers.get("content-type", "")
            if is_svg_content_type(content_type):
                return self._fail(
                    url,
                    ImageFailure.SVG_CONTENT_TYPE,
                    f"SVG content type {content_type!r}",
                )

            image_format = detect_image_format(url, content_type)
            data = response.content
        except Exception as exc:
            log.warning(
                "image fetch raised",
                exc_info=exc,
                extra={"extra_fields": {"url": url}},
            )
            return self._fail(url, ImageFailure.FETCH_ERROR, f"{type(exc).__name__}: {exc}")

        log.info(
            "image embedded",
            extra={"extra_fields": {
                "url": url,
                "format": image_format.value,
                "bytes": len(data),
            }},
        )
        return ImageResolution(
            url=url,
            image=FetchedImage(
                data=data,
                width=self._config.image_width,
                height=self._config.image_height,
                format=image_format,
            ),
        )

    def _fail(self, url: str, failure: ImageFailure, detail: str) -> ImageResolution:
        log.info(
            "image not embeddable",
            extra={"extra_fields": {"url": url, "reason": failure.value, "detail": detail}},
        )
        return ImageResolution(url=url, failure=failure, detail=detail)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ImageResolver:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
