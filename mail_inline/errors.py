"""Exceptions raised by the inlining pipeline."""

from __future__ import annotations


class InlineMailError(RuntimeError):
    """Base class for failures that abort a run."""


class InputReadError(InlineMailError):
    """The input HTML file could not be read."""


class CSSInliningError(InlineMailError):
    """The CSS inlining engine rejected the document."""


class OutputWriteError(InlineMailError):
    """The output HTML file could not be written."""
