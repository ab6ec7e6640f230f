"""Configuration objects and constants for the inliner."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_ENCODING = "utf-8"


@dataclass
class InlineConfig:
    """Settings that control which inlining stages run and how."""

    input_path: Path
    output_path: Path
    inline_style_urls: bool = True
    svg_as_text: bool = True
    sniff_unknown_types: bool = False
    load_remote_stylesheets: bool = True
    keep_style_tags: bool = False
    extra_css: Optional[str] = None

    @property
    def base_dir(self) -> Path:
        """Directory every local reference is resolved against."""
        return self.input_path.resolve().parent

    @property
    def base_url(self) -> str:
        # css-inline needs the trailing slash to treat the URL as a directory
        return self.base_dir.as_uri().rstrip("/") + "/"
