"""Helpers for image references (data URLs and CDN URLs)."""

import base64
import re
from urllib.parse import urlparse

_DATA_URL_HEADER = re.compile(r"^data:(?P<mime>[^;,]+)?(;base64)?$")


def parse_data_url(image: str) -> tuple[str, bytes]:
    """Split a data URL (or bare base64) into its MIME type and bytes."""
    mime_type = "image/jpeg"
    payload = image
    if "," in image:
        header, payload = image.split(",", 1)
        match = _DATA_URL_HEADER.match(header)
        if match and match.group("mime"):
            mime_type = match.group("mime")
    return mime_type, base64.b64decode(payload)


def to_data_url(image_bytes: bytes, mime_type: str = "image/png") -> str:
    """Encode bytes as a base64 data URL."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def optimized_image_url(
    url: str, width: int, cdn_host: str | None, quality: int = 75
) -> str:
    """Rewrite a CDN image URL into a resized variant.

    Data URLs, blobs and URLs outside the CDN host are returned unchanged.
    """
    if not url or not cdn_host:
        return url or ""
    if cdn_host not in url or "cdn-cgi" in url:
        return url
    parsed = urlparse(url)
    if not parsed.hostname:
        return url
    options = f"width={width},quality={quality},format=auto,fit=scale-down"
    return f"https://{parsed.hostname}/cdn-cgi/image/{options}{parsed.path}"
