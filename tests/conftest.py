"""Shared test fixtures for the docxify test suite."""

from __future__ import annotations

import base64
from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio

from docxify.config import DocxifyConfig
from docxify.converter.md_to_docx import MarkdownToDocxConverter
from docxify.image.resolver import ImageResolver

# 1x1 transparent PNG.
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class RecordingHandler:
    """``httpx.MockTransport`` handler that serves canned responses.

    Routes map a URL to a response factory; unknown URLs get a 404.
    Every requested URL is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[str] = []

    def add_image(self, url: str, data: bytes = PNG_BYTES, content_type: str = "image/png") -> None:
        self.routes[url] = lambda request: httpx.Response(
            200, content=data, headers={"content-type": content_type},
        )

    def add_status(self, url: str, status: int) -> None:
        self.routes[url] = lambda request: httpx.Response(status)

    def add_error(self, url: str, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc
        self.routes[url] = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404)
        return route(request)


@pytest.fixture
def config() -> DocxifyConfig:
    """Default test configuration."""
    return DocxifyConfig()


@pytest.fixture
def image_server() -> RecordingHandler:
    return RecordingHandler()


@pytest_asyncio.fixture
async def http_client(image_server: RecordingHandler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(image_server))
    yield client
    await client.aclose()


@pytest.fixture
def resolver(config: DocxifyConfig, http_client: httpx.AsyncClient) -> ImageResolver:
    """Image resolver backed by the mock image server."""
    return ImageResolver(config, client=http_client)


@pytest.fixture
def converter(config: DocxifyConfig, resolver: ImageResolver) -> MarkdownToDocxConverter:
    """Markdown-to-document converter using the default test config."""
    return MarkdownToDocxConverter(config, resolver)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
