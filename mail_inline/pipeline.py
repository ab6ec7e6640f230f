"""High-level orchestration of the inlining stages."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .config import DEFAULT_ENCODING, InlineConfig
from .css import CSSInliningEngine, CssInlineEngine, inline_css
from .errors import InputReadError, OutputWriteError
from .images import inline_images
from .models import InlineStats
from .styles import inline_style_urls

logger = logging.getLogger("mail_inline")


@dataclass
class PipelineResult:
    """Outcome of a successful run."""

    output_path: Path
    stats: InlineStats
    total_seconds: float


def read_input(path: Path) -> str:
    try:
        return path.read_text(encoding=DEFAULT_ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        raise InputReadError(f"Error reading input file: {exc}") from exc


def write_output(path: Path, html: str) -> None:
    """Write ``html`` to ``path`` atomically so no partial file is left behind."""
    directory = path.parent
    tmp_name: Optional[str] = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=directory
        )
        with os.fdopen(fd, "w", encoding=DEFAULT_ENCODING) as handle:
            handle.write(html)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputWriteError(f"Error writing output file: {exc}") from exc


def transform_html(html: str, config: InlineConfig) -> Tuple[str, InlineStats]:
    """Apply the synchronous data URI stages to ``html``."""
    html, stats = inline_images(html, config)
    if config.inline_style_urls:
        html, url_stats = inline_style_urls(html, config)
        stats = stats.merge(url_stats)
    return html, stats


async def run_pipeline(
    config: InlineConfig,
    engine: Optional[CSSInliningEngine] = None,
) -> PipelineResult:
    """Inline images and CSS for ``config.input_path`` into ``config.output_path``."""
    start = time.perf_counter()
    html = read_input(config.input_path)
    logger.info("Loaded %s", config.input_path)

    html, stats = transform_html(html, config)
    logger.debug(
        "Data URI stages: %d inlined, %d skipped, %d missing",
        stats.inlined,
        stats.skipped,
        stats.missing,
    )

    if engine is None:
        engine = CssInlineEngine.from_config(config)
    html = await inline_css(html, config.base_url, engine)

    write_output(config.output_path, html)
    return PipelineResult(
        output_path=config.output_path,
        stats=stats,
        total_seconds=time.perf_counter() - start,
    )
