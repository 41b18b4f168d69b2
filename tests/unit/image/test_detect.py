"""Tests for image/detect.py: SVG detection and format classification."""

import pytest

from docxify.image.detect import (
    detect_image_format,
    format_from_content_type,
    format_from_url,
    is_svg_content_type,
    is_svg_url,
)
from docxify.models import ImageFormat

# =========================================================================
# SVG detection
# =========================================================================


class TestIsSvgUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/logo.svg",
            "https://example.com/LOGO.SVG",
            "https://example.com/logo.svg?v=3",
            "https://example.com/logo.svg#frag",
            "logo.svg",
        ],
    )
    def test_svg(self, url):
        assert is_svg_url(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/logo.png",
            "https://example.com/svg/logo.png",
            "https://example.com/logo.svgz",
            "",
        ],
    )
    def test_not_svg(self, url):
        assert is_svg_url(url) is False


class TestIsSvgContentType:
    def test_svg_xml(self):
        assert is_svg_content_type("image/svg+xml") is True

    def test_svg_with_charset(self):
        assert is_svg_content_type("image/SVG+xml; charset=utf-8") is True

    def test_png(self):
        assert is_svg_content_type("image/png") is False


# =========================================================================
# Format classification
# =========================================================================


class TestFormatFromUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://x.org/a.png", ImageFormat.PNG),
            ("https://x.org/a.jpg", ImageFormat.JPG),
            ("https://x.org/a.JPEG", ImageFormat.JPG),
            ("https://x.org/a.gif", ImageFormat.GIF),
            ("https://x.org/a.bmp", ImageFormat.BMP),
            ("https://x.org/a.gif?size=large", ImageFormat.GIF),
        ],
    )
    def test_known_suffix(self, url, expected):
        assert format_from_url(url) is expected

    def test_unknown_suffix(self):
        assert format_from_url("https://x.org/image") is None
        assert format_from_url("https://x.org/a.webp") is None


class TestFormatFromContentType:
    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [
            ("image/png", ImageFormat.PNG),
            ("image/jpeg", ImageFormat.JPG),
            ("image/gif; charset=binary", ImageFormat.GIF),
            ("IMAGE/BMP", ImageFormat.BMP),
        ],
    )
    def test_known(self, content_type, expected):
        assert format_from_content_type(content_type) is expected

    def test_unknown(self):
        assert format_from_content_type("application/octet-stream") is None


class TestDetectImageFormat:
    def test_url_wins_over_content_type(self):
        assert detect_image_format("https://x.org/a.gif", "image/png") is ImageFormat.GIF

    def test_content_type_when_url_inconclusive(self):
        assert detect_image_format("https://x.org/render?id=1", "image/jpeg") is ImageFormat.JPG

    def test_defaults_to_png(self):
        assert detect_image_format("https://x.org/render", "") is ImageFormat.PNG
        assert detect_image_format("https://x.org/a.webp", "image/webp") is ImageFormat.PNG
