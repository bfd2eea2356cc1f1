"""
Exception types raised by the tilemapper pipeline.

Each error carries the pipeline stage and, where one is involved, the
filesystem path so the caller can format a one-line diagnostic. The
classes also derive from the closest builtin (``ValueError`` or
``OSError``) so generic handlers keep working.
"""

from __future__ import annotations


class TilemapperError(Exception):
    """Base class for all tilemapper failures."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.stage = stage

    def __str__(self) -> str:
        text = self.message
        if self.stage:
            text = f"{self.stage}: {text}"
        if self.path:
            text = f"{text} ({self.path})"
        return text


class ConfigurationError(TilemapperError, ValueError):
    """Invalid option values or an input that cannot produce a tilemap."""


class DiscoveryError(TilemapperError, OSError):
    """A directory could not be listed or a file could not be stat'ed."""


class CompositionError(TilemapperError, OSError):
    """A referenced tile image could not be decoded or resized."""
