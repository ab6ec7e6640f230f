from __future__ import annotations

from pathlib import Path

import pytest

from mail_inline.config import InlineConfig

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDRfake-image-payload"


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def config(tmp_path: Path) -> InlineConfig:
    return InlineConfig(
        input_path=tmp_path / "index.html",
        output_path=tmp_path / "out" / "index.html",
    )
