"""
Defines shared type aliases for tilemapper.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

from typing import Literal

LayoutName = Literal["list", "sequence", "animation"]
FitName = Literal["contain", "cover", "fill", "inside", "outside"]
KernelName = Literal["nearest", "cubic", "mitchell", "lanczos2", "lanczos3"]
OutputTypeName = Literal["png", "jpeg", "webp", "tiff"]

# [row][column] grid of tile paths, ``None`` marks an empty cell
Tileset = list[list[str | None]]
JSONDict = dict[str, object]
