"""Input validation helpers for runtime configuration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from tilemapper.errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence


def validate_input_paths(
    paths: Sequence[str],
    working_directory: str | None = None,
) -> None:
    """Ensure at least one input path is given and every one exists."""
    if not paths:
        msg = "No input paths specified"
        raise ConfigurationError(msg, stage="config")
    base = Path(working_directory) if working_directory else Path.cwd()
    for path in paths:
        if not (base / path).exists():
            msg = "Input path not found"
            raise ConfigurationError(msg, path=path, stage="config")
