"""Top-level orchestration: walk, lay out, and composite a tilemap."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

import tilemapper.runtime as tm_runtime
from tilemapper.compositor import (
    ResizeFit,
    ResizeKernel,
    TilemapInfo,
    composite,
)
from tilemapper.constants import JSON_INDENT
from tilemapper.errors import ConfigurationError
from tilemapper.layouts import Layout, layout_paths
from tilemapper.logging_utils import resolve_reporter
from tilemapper.walker import walk_paths

if TYPE_CHECKING:  # pragma: no cover
    from tilemapper.config import TilemapperConfig
    from tilemapper.logging_utils import Reporter


@dataclass(slots=True)
class TilemapResult:
    """Encoded tilemap plus the layout and sizing it was built from."""

    data: bytes
    info: TilemapInfo
    layout: Layout

    def to_json(self) -> str:
        """Serialize ``info`` and ``layout`` for downstream tooling."""
        payload = {
            "info": self.info.to_dict(),
            "layout": self.layout.to_dict(),
        }
        return json.dumps(payload, indent=JSON_INDENT) + "\n"


def build_tilemap(
    config: TilemapperConfig,
    *,
    reporter: Reporter | None = None,
    working_directory: str | None = None,
) -> TilemapResult:
    """
    Run the full pipeline for ``config`` and return the encoded result.

    Nothing is written to disk; see
    :func:`tilemapper.runtime.write_outputs`.

    Raises:
        ConfigurationError: If there are no inputs, no images were found,
            or the layout ends up empty.
        DiscoveryError: If an input path cannot be walked.
        CompositionError: If a tile image cannot be loaded.

    """
    report = resolve_reporter(reporter)
    tm_runtime.validate_input_paths(config.input.paths, working_directory)

    report.info("Finding files")
    path_infos = walk_paths(
        config.input.paths,
        config.input.extensions,
        working_directory,
        reporter=report,
    )
    if not path_infos:
        msg = "No input images found"
        raise ConfigurationError(msg, stage="walk")

    layout = layout_paths(
        config.layout.mode,
        path_infos,
        width=config.layout.list_width,
        long_names=config.layout.long_names,
        reporter=report,
    )
    if layout.is_empty():
        msg = "Generated layout contains no images"
        raise ConfigurationError(msg, stage="layout")

    data, info = composite(
        layout.tileset,
        output_type=config.output.resolve_output_type(),
        tile_width=config.tile.width,
        tile_height=config.tile.height,
        fit=ResizeFit(config.tile.fit),
        kernel=ResizeKernel(config.tile.kernel),
        min_count_x=config.tile.min_count_x,
        min_count_y=config.tile.min_count_y,
        reporter=report,
    )
    return TilemapResult(data=data, info=info, layout=layout)
