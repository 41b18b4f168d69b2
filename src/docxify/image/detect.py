"""Image format detection.

Classifies an image from its URL and the ``Content-Type`` a server
declared for it.  No bytes are decoded: the URL suffix is checked first,
then the content type, and PNG is assumed when both are inconclusive.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import urlparse

from docxify.models import ImageFormat

_SUFFIX_FORMATS: dict[str, ImageFormat] = {
    ".png": ImageFormat.PNG,
    ".jpg": ImageFormat.JPG,
    ".jpeg": ImageFormat.JPG,
    ".gif": ImageFormat.GIF,
    ".bmp": ImageFormat.BMP,
}

_MIME_FORMATS: dict[str, ImageFormat] = {
    "image/png": ImageFormat.PNG,
    "image/jpeg": ImageFormat.JPG,
    "image/jpg": ImageFormat.JPG,
    "image/gif": ImageFormat.GIF,
    "image/bmp": ImageFormat.BMP,
    "image/x-ms-bmp": ImageFormat.BMP,
}


def _url_suffix(url: str) -> str:
    """Lower-cased suffix of the URL path, ignoring query and fragment."""
    path = urlparse(url).path
    return PurePosixPath(path).suffix.lower()


def is_svg_url(url: str) -> bool:
    """Return ``True`` if *url* (or its path) ends in ``.svg``."""
    return url.strip().lower().endswith(".svg") or _url_suffix(url) == ".svg"


def is_svg_content_type(content_type: str) -> bool:
    return "svg" in content_type.lower()


def format_from_url(url: str) -> ImageFormat | None:
    return _SUFFIX_FORMATS.get(_url_suffix(url))


def format_from_content_type(content_type: str) -> ImageFormat | None:
    mime = content_type.split(";", 1)[0].strip().lower()
    return _MIME_FORMATS.get(mime)


def detect_image_format(url: str, content_type: str = "") -> ImageFormat:
    """Classify an image as one of the embeddable formats.

    Parameters
    ----------
    url:
        The image URL.
    content_type:
        The ``Content-Type`` header of the fetch response, if any.

    Returns
    -------
    ImageFormat
        The format from the URL suffix, else from *content_type*, else
        :attr:`ImageFormat.PNG`.
    """
    return (
        format_from_url(url)
        or format_from_content_type(content_type)
        or ImageFormat.PNG
    )
