"""
Compositing of a tileset grid into a single tilemap image.

Each referenced image is decoded, resized to the tile size, and
re-encoded as PNG on a worker thread. The encoded tiles are then pasted
serially onto a transparent canvas in row-major order, and the canvas is
encoded in the requested output format. All raster work is done by
Pillow.
"""

from __future__ import annotations

import io
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from PIL import Image, ImageOps

from tilemapper.config_defaults import (
    DEFAULT_FIT,
    DEFAULT_KERNEL,
    DEFAULT_MIN_COUNT_X,
    DEFAULT_MIN_COUNT_Y,
    DEFAULT_TILE_HEIGHT,
    DEFAULT_TILE_WIDTH,
)
from tilemapper.constants import (
    COLOR_MODE_RGB,
    COLOR_MODE_RGBA,
    COLOR_TRANSPARENT,
    COLOR_WHITE,
    SVG_EXTENSION,
    TILE_BUFFER_FORMAT,
)
from tilemapper.errors import CompositionError, ConfigurationError
from tilemapper.logging_utils import resolve_reporter

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from tilemapper.logging_utils import Reporter
    from tilemapper.type_defs import JSONDict

_RGB = tuple[int, int, int]


class ResizeFit(StrEnum):
    """How a tile's aspect ratio is reconciled with the tile size."""

    CONTAIN = "contain"
    COVER = "cover"
    FILL = "fill"
    INSIDE = "inside"
    OUTSIDE = "outside"


class ResizeKernel(StrEnum):
    """Resampling filter used when scaling tiles."""

    NEAREST = "nearest"
    CUBIC = "cubic"
    MITCHELL = "mitchell"
    LANCZOS2 = "lanczos2"
    LANCZOS3 = "lanczos3"


class OutputType(StrEnum):
    """Encoded format of the finished tilemap."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    TIFF = "tiff"


# Pillow has no Mitchell or 2-lobe Lanczos filter; these are the closest
# filters it ships.
_RESAMPLING: dict[ResizeKernel, Image.Resampling] = {
    ResizeKernel.NEAREST: Image.Resampling.NEAREST,
    ResizeKernel.CUBIC: Image.Resampling.BICUBIC,
    ResizeKernel.MITCHELL: Image.Resampling.BICUBIC,
    ResizeKernel.LANCZOS2: Image.Resampling.HAMMING,
    ResizeKernel.LANCZOS3: Image.Resampling.LANCZOS,
}

_PIL_FORMATS: dict[OutputType, str] = {
    OutputType.PNG: "PNG",
    OutputType.JPEG: "JPEG",
    OutputType.WEBP: "WEBP",
    OutputType.TIFF: "TIFF",
}

_KERNEL_ALIASES = {"lancoz2": "lanczos2", "lancoz3": "lanczos3"}
OUTPUT_TYPE_ALIASES = {"jpg": "jpeg", "tif": "tiff"}

_CENTER = (0.5, 0.5)


def _parse_choice[E: StrEnum](
    enum_cls: type[E],
    text: str,
    label: str,
    aliases: dict[str, str] | None = None,
) -> E:
    value = text.strip().lower()
    if aliases:
        value = aliases.get(value, value)
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(f'"{member.value}"' for member in enum_cls)
        msg = f'Invalid {label} "{text}", expected one of {choices}'
        raise ConfigurationError(msg, stage="config") from exc


def parse_fit(text: str) -> ResizeFit:
    """Parse a fit mode name."""
    return _parse_choice(ResizeFit, text, "fit")


def parse_kernel(text: str) -> ResizeKernel:
    """Parse a kernel name, accepting the ``lancozN`` spellings."""
    return _parse_choice(ResizeKernel, text, "kernel", _KERNEL_ALIASES)


def parse_output_type(text: str) -> OutputType:
    """Parse an output type, accepting ``jpg`` and ``tif``."""
    return _parse_choice(OutputType, text, "output type", OUTPUT_TYPE_ALIASES)


@dataclass(frozen=True, slots=True)
class TilemapInfo:
    """Pixel and tile dimensions of a composited tilemap."""

    width: int
    height: int
    count_x: int
    count_y: int
    tile_width: int
    tile_height: int

    def to_dict(self) -> JSONDict:
        return {
            "width": self.width,
            "height": self.height,
            "countX": self.count_x,
            "countY": self.count_y,
            "tileWidth": self.tile_width,
            "tileHeight": self.tile_height,
        }


def to_rgb(img: Image.Image, *, bg_color: _RGB) -> Image.Image:
    """Convert PIL image to RGB, alpha compositing if needed."""
    if img.mode == COLOR_MODE_RGB:
        return img
    if img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info:
        bg = Image.new(COLOR_MODE_RGBA, img.size, (*bg_color, 255))
        comp = Image.alpha_composite(bg, img.convert(COLOR_MODE_RGBA))
        return comp.convert(COLOR_MODE_RGB)
    return img.convert(COLOR_MODE_RGB)


def _scale_outside(
    img: Image.Image,
    size: tuple[int, int],
    resample: Image.Resampling,
) -> Image.Image:
    """Scale keeping aspect so both edges are at least ``size``."""
    width, height = size
    scale = max(width / img.width, height / img.height)
    new_size = (
        max(width, round(img.width * scale)),
        max(height, round(img.height * scale)),
    )
    return img.resize(new_size, resample)


def fit_image(
    img: Image.Image,
    size: tuple[int, int],
    fit: ResizeFit,
    kernel: ResizeKernel,
) -> Image.Image:
    """
    Resize ``img`` towards ``size`` using the given fit mode.

    ``cover`` crops and ``contain`` pads (transparently) around the
    center. ``inside`` may return a smaller image and ``outside`` a
    larger one; callers clip to the cell.
    """
    resample = _RESAMPLING[kernel]
    if fit is ResizeFit.FILL:
        return img.resize(size, resample)
    if fit is ResizeFit.COVER:
        return ImageOps.fit(img, size, method=resample, centering=_CENTER)
    if fit is ResizeFit.CONTAIN:
        return ImageOps.pad(
            img, size, method=resample,
            color=COLOR_TRANSPARENT, centering=_CENTER,
        )
    if fit is ResizeFit.INSIDE:
        return ImageOps.contain(img, size, method=resample)
    return _scale_outside(img, size, resample)


def load_tile(path: str) -> Image.Image:
    """
    Decode one tile image as RGBA.

    SVG files are rasterized at their intrinsic size with CairoSVG first,
    since Pillow has no vector decoder.
    """
    if os.path.splitext(path)[1].lower() == SVG_EXTENSION:
        # Imported on first use: cairocffi loads the system cairo library
        import cairosvg  # noqa: PLC0415

        png = cairosvg.svg2png(url=path)
        with Image.open(io.BytesIO(png)) as src:
            return src.convert(COLOR_MODE_RGBA)
    with Image.open(path) as src:
        return src.convert(COLOR_MODE_RGBA)


def resize_tile(
    path: str,
    size: tuple[int, int],
    fit: ResizeFit,
    kernel: ResizeKernel,
) -> bytes:
    """
    Decode, resize and re-encode one tile as PNG bytes.

    The result never exceeds ``size`` so tiles cannot spill into
    neighbouring cells.

    Raises:
        CompositionError: If the image cannot be decoded or resized,
            including malformed SVG markup.

    """
    try:
        img = load_tile(path)
        tile = fit_image(img, size, fit, kernel)
        if tile.width > size[0] or tile.height > size[1]:
            tile = tile.crop(
                (0, 0, min(tile.width, size[0]), min(tile.height, size[1])),
            )
        buffer = io.BytesIO()
        tile.save(buffer, format=TILE_BUFFER_FORMAT)
    except (
        OSError, ValueError, SyntaxError, Image.DecompressionBombError,
    ) as exc:
        msg = f"Cannot load tile image: {exc}"
        raise CompositionError(msg, path=path, stage="composite") from exc
    return buffer.getvalue()


def encode_image(img: Image.Image, output_type: OutputType) -> bytes:
    """
    Encode the tilemap canvas.

    JPEG has no alpha channel, so the canvas is flattened onto white
    first.
    """
    if output_type is OutputType.JPEG:
        img = to_rgb(img, bg_color=COLOR_WHITE)
    buffer = io.BytesIO()
    img.save(buffer, format=_PIL_FORMATS[output_type])
    return buffer.getvalue()


def grid_counts(
    tileset: Sequence[Sequence[str | None]],
    min_count_x: int = 0,
    min_count_y: int = 0,
) -> tuple[int, int]:
    """Return the effective (columns, rows) of ``tileset``."""
    count_x = max([min_count_x, *(len(row) for row in tileset)])
    count_y = max(min_count_y, len(tileset))
    return count_x, count_y


def _validate_dimensions(
    tile_width: int,
    tile_height: int,
    min_count_x: int,
    min_count_y: int,
) -> None:
    if tile_width < 1 or tile_height < 1:
        msg = (f"Tile size must be positive, got "
               f"{tile_width}x{tile_height}")
        raise ConfigurationError(msg, stage="composite")
    if min_count_x < 0 or min_count_y < 0:
        msg = (f"Minimum tile counts must not be negative, got "
               f"{min_count_x}x{min_count_y}")
        raise ConfigurationError(msg, stage="composite")


def composite(  # noqa: PLR0913
    tileset: Sequence[Sequence[str | None]],
    *,
    output_type: OutputType = OutputType.PNG,
    tile_width: int = DEFAULT_TILE_WIDTH,
    tile_height: int = DEFAULT_TILE_HEIGHT,
    fit: ResizeFit = ResizeFit(DEFAULT_FIT),
    kernel: ResizeKernel = ResizeKernel(DEFAULT_KERNEL),
    min_count_x: int = DEFAULT_MIN_COUNT_X,
    min_count_y: int = DEFAULT_MIN_COUNT_Y,
    reporter: Reporter | None = None,
    max_workers: int | None = None,
) -> tuple[bytes, TilemapInfo]:
    """
    Composite a ``[row][column]`` grid of image paths into a tilemap.

    Args:
        tileset: Ragged grid of paths; ``None`` marks an empty cell.
        output_type: Encoding of the returned image.
        tile_width: Width of every tile in pixels.
        tile_height: Height of every tile in pixels.
        fit: Fit mode used when resizing tiles.
        kernel: Resampling filter used when resizing tiles.
        min_count_x: Minimum number of columns in the output.
        min_count_y: Minimum number of rows in the output.
        reporter: Destination for progress messages.
        max_workers: Thread pool size for tile resizing.

    Returns:
        The encoded image and its :class:`TilemapInfo`.

    Raises:
        ConfigurationError: If the grid would have no columns or rows,
            or a size parameter is out of range.
        CompositionError: If a referenced tile cannot be loaded.

    """
    _validate_dimensions(tile_width, tile_height, min_count_x, min_count_y)
    report = resolve_reporter(reporter)

    count_x, count_y = grid_counts(tileset, min_count_x, min_count_y)
    if count_x < 1 or count_y < 1:
        msg = (f"Tilemap must contain at least one tile, got "
               f"{count_x}x{count_y}")
        raise ConfigurationError(msg, stage="composite")

    info = TilemapInfo(
        width=count_x * tile_width,
        height=count_y * tile_height,
        count_x=count_x,
        count_y=count_y,
        tile_width=tile_width,
        tile_height=tile_height,
    )
    report.info(
        "composite: Compositing tilemap with %dx%d tiles (%dx%d)",
        count_x, count_y, info.width, info.height,
    )

    jobs = [
        (x, y, path)
        for y, row in enumerate(tileset)
        for x, path in enumerate(row)
        if path is not None
    ]
    size = (tile_width, tile_height)

    def _render(job: tuple[int, int, str]) -> bytes:
        x, y, path = job
        report.debug('composite: Generating overlay for "%s"', path)
        try:
            return resize_tile(path, size, fit, kernel)
        except CompositionError as exc:
            msg = f"{exc.message} at cell ({x}, {y})"
            raise CompositionError(
                msg, path=path, stage="composite",
            ) from exc.__cause__

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        rendered = list(executor.map(_render, jobs))

    report.info(
        "composite: Generated %d overlays, compositing...", len(rendered),
    )

    canvas = Image.new(COLOR_MODE_RGBA, (info.width, info.height),
                       COLOR_TRANSPARENT)
    for (x, y, _), data in zip(jobs, rendered, strict=True):
        with Image.open(io.BytesIO(data)) as tile:
            canvas.alpha_composite(
                tile.convert(COLOR_MODE_RGBA),
                dest=(x * tile_width, y * tile_height),
            )

    return encode_image(canvas, output_type), info


__all__ = [
    "OUTPUT_TYPE_ALIASES",
    "OutputType",
    "ResizeFit",
    "ResizeKernel",
    "TilemapInfo",
    "composite",
    "encode_image",
    "fit_image",
    "grid_counts",
    "load_tile",
    "parse_fit",
    "parse_kernel",
    "parse_output_type",
    "resize_tile",
    "to_rgb",
]
