"""Helpers for persisting the tilemap image and its JSON side-file."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from tilemapper.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from tilemapper.pipeline import TilemapResult


def atomic_write(path: Path | str, data: bytes) -> Path:
    """
    Write ``data`` to ``path`` through a temporary sibling file.

    The temporary file is moved into place only after the write has
    completed, so an interrupted write never leaves a truncated file at
    ``path``. Parent directories are created as needed.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent,
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def write_outputs(
    result: TilemapResult,
    output_path: Path | str,
    json_path: Path | str | None = None,
) -> list[Path]:
    """
    Persist the encoded tilemap and, optionally, its JSON description.

    Returns the list of written paths in write order.
    """
    written: list[Path] = []

    logger.info("Writing output image: %s", output_path)
    written.append(atomic_write(output_path, result.data))

    if json_path is not None:
        logger.info("Writing output JSON: %s", json_path)
        written.append(
            atomic_write(json_path, result.to_json().encode("utf-8")),
        )
    return written
