"""Data models used throughout the inlining pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

_SUFFIX_PATTERN = re.compile(r"[?#]")
_REMOTE_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_DATA_PATTERN = re.compile(r"^data:", re.IGNORECASE)


@dataclass(frozen=True)
class ResourceReference:
    """Local path found in the markup, either an img src or a CSS url()."""

    raw: str

    @property
    def path(self) -> str:
        """Reference with any query string or fragment removed."""
        return _SUFFIX_PATTERN.split(self.raw, maxsplit=1)[0]

    @property
    def is_remote(self) -> bool:
        return bool(_REMOTE_PATTERN.match(self.raw))

    @property
    def is_data_uri(self) -> bool:
        return bool(_DATA_PATTERN.match(self.raw))

    @property
    def is_fragment(self) -> bool:
        """Same-document reference such as an SVG gradient id."""
        return unquote(self.raw).startswith("#")

    @property
    def should_skip(self) -> bool:
        return self.is_remote or self.is_data_uri or self.is_fragment

    def resolve(self, base_dir: Path) -> Path:
        """Absolute filesystem path relative to ``base_dir``."""
        return (base_dir / self.path).resolve()


@dataclass
class InlineStats:
    """Counters collected while a stage rewrites references."""

    inlined: int = 0
    skipped: int = 0
    missing: int = 0

    def merge(self, other: "InlineStats") -> "InlineStats":
        return InlineStats(
            inlined=self.inlined + other.inlined,
            skipped=self.skipped + other.skipped,
            missing=self.missing + other.missing,
        )
