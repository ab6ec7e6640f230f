"""Encode local asset files as ``data:`` URIs."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import quote

from filetype import guess

from .config import DEFAULT_ENCODING, InlineConfig
from .models import ResourceReference

logger = logging.getLogger("mail_inline")

DEFAULT_MIME_TYPE = "application/octet-stream"
SVG_MIME_TYPE = "image/svg+xml"

MIME_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "png": "image/png",
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "gif": "image/gif",
        "webp": "image/webp",
        "ico": "image/x-icon",
        "svg": SVG_MIME_TYPE,
    }
)

# Characters encodeURIComponent leaves alone; ' ( ) are safe inside a data URI.
_URI_COMPONENT_SAFE = "!*'()"
_BOM = "\ufeff"


def file_extension(path: Path) -> str:
    """Lower-cased extension without the leading dot."""
    return path.suffix[1:].lower()


def sniff_mime_type(data: bytes) -> Optional[str]:
    """Detect a MIME type from the file signature using filetype."""
    kind = guess(data)
    if kind:
        return kind.mime
    return None


def mime_type_for(path: Path, data: bytes = b"", sniff: bool = False) -> str:
    """Look up the MIME type for ``path``, falling back to octet-stream."""
    mime = MIME_TYPES.get(file_extension(path))
    if mime:
        return mime
    if sniff and data:
        sniffed = sniff_mime_type(data)
        if sniffed:
            logger.debug("Detected %s for %s from its signature", sniffed, path.name)
            return sniffed
    return DEFAULT_MIME_TYPE


def encode_svg_text(text: str) -> str:
    """Return a UTF-8 percent-encoded SVG data URI."""
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    return f"data:{SVG_MIME_TYPE};utf8,{quote(text, safe=_URI_COMPONENT_SAFE)}"


def encode_base64(data: bytes, mime: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def file_to_data_uri(
    path: Path,
    svg_as_text: bool = True,
    sniff_unknown_types: bool = False,
) -> Optional[str]:
    """Encode the file at ``path``; returns None when it cannot be inlined.

    SVG files are embedded as percent-encoded text unless ``svg_as_text``
    is disabled, every other format is base64 encoded. Unknown extensions
    map to ``application/octet-stream`` unless ``sniff_unknown_types``
    finds a better match in the file signature.
    """
    try:
        if not path.is_file():
            return None
    except (OSError, ValueError) as exc:
        logger.debug("Failed to stat %s: %s", path, exc)
        return None

    if svg_as_text and file_extension(path) == "svg":
        try:
            text = path.read_text(encoding=DEFAULT_ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Failed to read SVG %s: %s", path, exc)
            return None
        return encode_svg_text(text)

    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.debug("Failed to read %s: %s", path, exc)
        return None
    return encode_base64(data, mime_type_for(path, data, sniff=sniff_unknown_types))


def reference_to_data_uri(
    reference: ResourceReference,
    config: InlineConfig,
) -> Optional[str]:
    """Resolve ``reference`` against the input directory and encode it."""
    try:
        path = reference.resolve(config.base_dir)
    except (OSError, ValueError, RuntimeError) as exc:
        logger.debug("Failed to resolve %s: %s", reference.raw, exc)
        return None
    return file_to_data_uri(
        path,
        svg_as_text=config.svg_as_text,
        sniff_unknown_types=config.sniff_unknown_types,
    )
