"""Public package exports for tilemapper."""

from __future__ import annotations

from .compositor import (
    OutputType,
    ResizeFit,
    ResizeKernel,
    TilemapInfo,
    composite,
)
from .errors import (
    CompositionError,
    ConfigurationError,
    DiscoveryError,
    TilemapperError,
)
from .layouts import (
    AnimationLayout,
    Layout,
    LayoutMode,
    SequenceLayout,
    layout_animations,
    layout_list,
    layout_paths,
    layout_sequences,
)
from .pipeline import TilemapResult, build_tilemap
from .sorting import NaturalSorter, natural_sorted
from .walker import PathInfo, walk_paths

__all__ = [
    "AnimationLayout",
    "CompositionError",
    "ConfigurationError",
    "DiscoveryError",
    "Layout",
    "LayoutMode",
    "NaturalSorter",
    "OutputType",
    "PathInfo",
    "ResizeFit",
    "ResizeKernel",
    "SequenceLayout",
    "TilemapInfo",
    "TilemapResult",
    "TilemapperError",
    "build_tilemap",
    "composite",
    "layout_animations",
    "layout_list",
    "layout_paths",
    "layout_sequences",
    "natural_sorted",
    "walk_paths",
]
