"""Replace local ``<img src>`` references with data URIs.

Tags are matched with a regular expression rather than an HTML parser, so
this is best-effort: quoted attribute values may contain ``>`` and the
``src`` attribute may appear anywhere in the tag, but unquoted ``src``
values, template syntax and markup inside comments are not treated
specially.
"""

from __future__ import annotations

import logging
import re
from typing import Tuple

from .config import InlineConfig
from .datauri import reference_to_data_uri
from .models import InlineStats, ResourceReference

logger = logging.getLogger("mail_inline")

_ATTRIBUTE_TEXT = r"""(?:[^>"']|"[^"]*"|'[^']*')"""

IMG_SRC_PATTERN = re.compile(
    r"<img\b"
    rf"(?P<before>{_ATTRIBUTE_TEXT}*?\s)"
    r"(?P<assign>src\s*=\s*)"
    r"(?P<quote>[\"'])(?P<src>(?:(?!(?P=quote)).)*)(?P=quote)"
    rf"(?P<after>{_ATTRIBUTE_TEXT}*)"
    r">",
    re.IGNORECASE | re.DOTALL,
)


def inline_images(
    html: str,
    config: InlineConfig,
) -> Tuple[str, InlineStats]:
    """Embed every resolvable local image found in ``html``."""
    stats = InlineStats()

    def _replace(match: re.Match[str]) -> str:
        reference = ResourceReference(match.group("src"))
        if reference.should_skip:
            stats.skipped += 1
            return match.group(0)

        uri = reference_to_data_uri(reference, config)
        if uri is None:
            logger.warning("Image not found, skipping: %s", reference.raw)
            stats.missing += 1
            return match.group(0)

        stats.inlined += 1
        logger.debug("Inlined image %s", reference.raw)
        return (
            f"<img{match.group('before')}{match.group('assign')}"
            f'"{uri}"{match.group("after")}>'
        )

    return IMG_SRC_PATTERN.sub(_replace, html), stats
