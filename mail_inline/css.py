"""Adapter around the css-inline engine that moves CSS rules into style attributes."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

import css_inline

from .config import InlineConfig
from .errors import CSSInliningError

logger = logging.getLogger("mail_inline")


class CSSInliningEngine(Protocol):
    """Anything that can merge stylesheet rules into inline ``style`` attributes."""

    def inline(self, html: str, base_url: str) -> str:
        ...


class CssInlineEngine:
    """Thin wrapper around ``css_inline.CSSInliner``."""

    def __init__(
        self,
        load_remote_stylesheets: bool = True,
        keep_style_tags: bool = False,
        extra_css: Optional[str] = None,
    ) -> None:
        self.load_remote_stylesheets = load_remote_stylesheets
        self.keep_style_tags = keep_style_tags
        self.extra_css = extra_css

    @classmethod
    def from_config(cls, config: InlineConfig) -> "CssInlineEngine":
        return cls(
            load_remote_stylesheets=config.load_remote_stylesheets,
            keep_style_tags=config.keep_style_tags,
            extra_css=config.extra_css,
        )

    def inline(self, html: str, base_url: str) -> str:
        inliner = css_inline.CSSInliner(
            base_url=base_url,
            load_remote_stylesheets=self.load_remote_stylesheets,
            keep_style_tags=self.keep_style_tags,
            extra_css=self.extra_css,
        )
        return inliner.inline(html)


async def inline_css(html: str, base_url: str, engine: CSSInliningEngine) -> str:
    """Run ``engine`` off the event loop and normalise its failures."""
    logger.debug("Inlining CSS with base URL %s", base_url)
    try:
        return await asyncio.to_thread(engine.inline, html, base_url)
    except Exception as exc:  # pylint: disable=broad-except
        raise CSSInliningError(f"Error inlining CSS: {exc}") from exc
