"""Tests for image/resolver.py.

The resolver is exercised against ``httpx.MockTransport``; no request
leaves the process.
"""

from __future__ import annotations

import httpx
import pytest

from docxify.config import DocxifyConfig
from docxify.image.resolver import ImageResolver
from docxify.models import ImageFailure, ImageFormat

# =========================================================================
# Success
# =========================================================================


class TestResolveSuccess:
    @pytest.mark.asyncio
    async def test_png(self, resolver, image_server, png_bytes):
        image_server.add_image("https://img.test/a.png")
        resolution = await resolver.resolve("https://img.test/a.png")
        assert resolution.embeddable
        assert resolution.failure is None
        assert resolution.image.data == png_bytes
        assert resolution.image.format is ImageFormat.PNG
        assert (resolution.image.width, resolution.image.height) == (400, 300)

    @pytest.mark.asyncio
    async def test_format_from_content_type(self, resolver, image_server):
        image_server.add_image("https://img.test/render?id=7", data=b"GIF89a", content_type="image/gif")
        resolution = await resolver.resolve("https://img.test/render?id=7")
        assert resolution.image.format is ImageFormat.GIF

    @pytest.mark.asyncio
    async def test_configured_dimensions(self, http_client, image_server):
        image_server.add_image("https://img.test/a.png")
        resolver = ImageResolver(DocxifyConfig(image_width=640, image_height=480), client=http_client)
        resolution = await resolver.resolve("https://img.test/a.png")
        assert (resolution.image.width, resolution.image.height) == (640, 480)


# =========================================================================
# Failures
# =========================================================================


class TestResolveFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url",
        ["https://img.test/logo.svg", "https://img.test/logo.SVG", "https://img.test/logo.svg?x=1"],
    )
    async def test_svg_url_is_not_fetched(self, resolver, image_server, url):
        resolution = await resolver.resolve(url)
        assert resolution.failure is ImageFailure.SVG_SUFFIX
        assert not resolution.embeddable
        assert image_server.requests == []

    @pytest.mark.asyncio
    async def test_svg_content_type(self, resolver, image_server):
        image_server.add_image("https://img.test/icon", data=b"<svg/>", content_type="image/svg+xml")
        resolution = await resolver.resolve("https://img.test/icon")
        assert resolution.failure is ImageFailure.SVG_CONTENT_TYPE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 403, 404, 500])
    async def test_non_success_status(self, resolver, image_server, status):
        image_server.add_status("https://img.test/a.png", status)
        resolution = await resolver.resolve("https://img.test/a.png")
        assert resolution.failure is ImageFailure.HTTP_STATUS
        assert str(status) in resolution.detail

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            RuntimeError("unexpected"),
        ],
    )
    async def test_exceptions_never_propagate(self, resolver, image_server, exc):
        image_server.add_error("https://img.test/a.png", exc)
        resolution = await resolver.resolve("https://img.test/a.png")
        assert resolution.failure is ImageFailure.FETCH_ERROR
        assert type(exc).__name__ in resolution.detail

    @pytest.mark.asyncio
    async def test_empty_url(self, resolver, image_server):
        resolution = await resolver.resolve("")
        assert resolution.failure is ImageFailure.FETCH_ERROR
        assert image_server.requests == []

    @pytest.mark.asyncio
    async def test_single_attempt(self, resolver, image_server):
        image_server.add_status("https://img.test/a.png", 503)
        await resolver.resolve("https://img.test/a.png")
        assert image_server.requests == ["https://img.test/a.png"]


# =========================================================================
# Lifecycle
# =========================================================================


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_borrowed_client_is_not_closed(self, http_client):
        async with ImageResolver(DocxifyConfig(), client=http_client):
            pass
        assert not http_client.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        resolver = ImageResolver(DocxifyConfig())
        await resolver.aclose()
        assert resolver._client.is_closed

    def test_owned_client_uses_config(self):
        resolver = ImageResolver(DocxifyConfig(user_agent="agent/1", timeout_seconds=5))
        assert resolver._client.headers["User-Agent"] == "agent/1"
        assert resolver._client.timeout.read == 5
