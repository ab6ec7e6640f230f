"""Replace local CSS ``url(...)`` references with data URIs.

The whole document is scanned, so ``<style>`` blocks and inline ``style``
attributes are handled the same way.
"""

from __future__ import annotations

import logging
import re
from typing import Tuple

from .config import InlineConfig
from .datauri import reference_to_data_uri
from .models import InlineStats, ResourceReference

logger = logging.getLogger("mail_inline")

# Quoted data: values are consumed whole so url() text inside an inlined
# SVG is never rewritten.
CSS_URL_PATTERN = re.compile(
    r"(?P<data>\"data:[^\"]*\"|'data:[^']*')"
    r"|url\(\s*"
    r"(?:\"(?P<double>[^\"]*)\"|'(?P<single>[^']*)'|(?P<bare>[^\"'()\s]+))"
    r"\s*\)",
    re.IGNORECASE,
)


def _match_path(match: re.Match[str]) -> str:
    for group in ("double", "single", "bare"):
        value = match.group(group)
        if value is not None:
            return value.strip()
    return ""


def inline_style_urls(
    html: str,
    config: InlineConfig,
) -> Tuple[str, InlineStats]:
    """Embed every resolvable local asset referenced through ``url()``."""
    stats = InlineStats()

    def _replace(match: re.Match[str]) -> str:
        raw = _match_path(match)
        if match.group("data") is not None or not raw:
            return match.group(0)
        reference = ResourceReference(raw)
        if reference.should_skip:
            stats.skipped += 1
            return match.group(0)

        uri = reference_to_data_uri(reference, config)
        if uri is None:
            logger.warning("Style resource not found, skipping: %s", reference.raw)
            stats.missing += 1
            return match.group(0)

        stats.inlined += 1
        logger.debug("Inlined style resource %s", reference.raw)
        return f'url("{uri}")'

    return CSS_URL_PATTERN.sub(_replace, html), stats
