"""Image pipeline: classify and fetch images for embedding.

Exports
-------
ImageResolver
    Fetch an image URL and return an ``ImageResolution``, never raising.
detect_image_format
    Classify an image as png, jpg, gif or bmp from its URL and content type.
is_svg_url
    Detect SVG URLs, which are never fetched.
"""

from .detect import detect_image_format, is_svg_content_type, is_svg_url
from .resolver import ImageResolver

__all__ = [
    "ImageResolver",
    "detect_image_format",
    "is_svg_content_type",
    "is_svg_url",
]
