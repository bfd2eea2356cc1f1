"""
Layout orchestration for turning discovered images into tile grids.

Three policies are supported:

* ``list``: every image left to right, wrapping after ``width`` tiles.
* ``sequence``: one row per run of images sharing a directory.
* ``animation``: one row per (animation, angle) pair, for trees shaped
  like ``<animation>/<angle>/<frame>``.

Every layout carries the ``tileset`` grid handed to the compositor and a
``tiles`` listing with the grid coordinate of each populated cell.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from tilemapper.config_defaults import DEFAULT_LIST_WIDTH
from tilemapper.constants import NAME_SEPARATOR
from tilemapper.errors import ConfigurationError
from tilemapper.logging_utils import resolve_reporter
from tilemapper.sorting import NaturalSorter

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence as SequenceT

    from tilemapper.logging_utils import Reporter
    from tilemapper.type_defs import JSONDict, Tileset
    from tilemapper.walker import PathInfo


# Plain decimal degrees, e.g. "90", "-45" or "22.5"
_ANGLE_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


class LayoutMode(StrEnum):
    """Available layout policies."""

    LIST = "list"
    SEQUENCE = "sequence"
    ANIMATION = "animation"


@dataclass(frozen=True, slots=True)
class Tile:
    """A populated cell, positioned in grid units."""

    name: str
    path: str
    x: int
    y: int

    def to_dict(self) -> JSONDict:
        return {"name": self.name, "path": self.path, "x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class Sequence:
    """A row of frames taken from one directory."""

    name: str
    row: int
    length: int

    def to_dict(self) -> JSONDict:
        return {"name": self.name, "row": self.row, "length": self.length}


@dataclass(frozen=True, slots=True)
class AngleSequence:
    """The row holding one angle of an animation."""

    angle: int | float
    row: int
    length: int

    def to_dict(self) -> JSONDict:
        return {"angle": self.angle, "row": self.row, "length": self.length}


@dataclass(slots=True)
class Animation:
    """A named animation and its per-angle rows, in ascending angle order."""

    name: str
    angles: list[AngleSequence] = field(default_factory=list)

    def to_dict(self) -> JSONDict:
        return {
            "name": self.name,
            "angles": [angle.to_dict() for angle in self.angles],
        }


@dataclass(slots=True)
class Layout:
    """Grid of tile paths plus a listing of every populated cell."""

    tileset: Tileset = field(default_factory=list)
    tiles: list[Tile] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when no cell of the grid holds a path."""
        return all(cell is None for row in self.tileset for cell in row)

    def place(self, path_info: PathInfo, x: int, y: int, *,
              long_names: bool) -> Tile:
        """Put ``path_info`` at grid cell (x, y) and record the tile."""
        while len(self.tileset) <= y:
            self.tileset.append([])
        row = self.tileset[y]
        while len(row) <= x:
            row.append(None)
        row[x] = path_info.path

        tile = Tile(
            name=tile_name(path_info, long_names=long_names),
            path=path_info.path,
            x=x,
            y=y,
        )
        self.tiles.append(tile)
        return tile

    def to_dict(self) -> JSONDict:
        return {
            "tileset": [list(row) for row in self.tileset],
            "tiles": [tile.to_dict() for tile in self.tiles],
        }


@dataclass(slots=True)
class SequenceLayout(Layout):
    """Layout with one named sequence per row."""

    sequences: list[Sequence] = field(default_factory=list)

    def to_dict(self) -> JSONDict:
        data = Layout.to_dict(self)
        data["sequences"] = [seq.to_dict() for seq in self.sequences]
        return data


@dataclass(slots=True)
class AnimationLayout(Layout):
    """
    Layout with one row per animation angle.

    ``skipped`` lists ``(path, reason)`` for inputs whose directories did
    not match the ``<animation>/<angle>/`` shape.
    """

    animations: list[Animation] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> JSONDict:
        data = Layout.to_dict(self)
        data["animations"] = [anim.to_dict() for anim in self.animations]
        return data


def tile_name(path_info: PathInfo, *, long_names: bool) -> str:
    """Tile name: the basename, prefixed with the directory chain if long."""
    if long_names and path_info.dirnames:
        return (NAME_SEPARATOR.join(path_info.dirnames) + NAME_SEPARATOR
                + path_info.basename)
    return path_info.basename


def layout_list(
    path_infos: SequenceT[PathInfo],
    *,
    width: int = DEFAULT_LIST_WIDTH,
    long_names: bool = False,
    reporter: Reporter | None = None,
) -> Layout:
    """
    Lay images out left to right, wrapping after ``width`` tiles.

    The last row holds only the remaining images, so the grid may be
    ragged.
    """
    if width < 1:
        msg = f"List width must be at least 1, got {width}"
        raise ConfigurationError(msg, stage="layout")

    report = resolve_reporter(reporter)
    report.info(
        "layoutList: Laying out %d images with width %d",
        len(path_infos), width,
    )

    layout = Layout()
    for index, path_info in enumerate(path_infos):
        y, x = divmod(index, width)
        layout.place(path_info, x, y, long_names=long_names)
    return layout


def layout_sequences(
    path_infos: SequenceT[PathInfo],
    *,
    long_names: bool = False,
    reporter: Reporter | None = None,
) -> SequenceLayout:
    """
    Lay images out one row per directory.

    Consecutive inputs with the same parent directory form a sequence.
    Inputs from the walker are naturally sorted, so a directory's files
    are contiguous and each directory yields exactly one row.
    """
    report = resolve_reporter(reporter)
    report.info("layoutSequences: Laying out %d images", len(path_infos))

    layout = SequenceLayout()
    current_dir: str | None = None
    name = ""
    x = 0
    y = -1
    for path_info in path_infos:
        if path_info.dirname != current_dir:
            if y >= 0:
                layout.sequences.append(Sequence(name, y, x))
            current_dir = path_info.dirname
            name = (path_info.joined_dirnames if long_names
                    else path_info.parent_name)
            x = 0
            y += 1
        layout.place(path_info, x, y, long_names=long_names)
        x += 1
    if y >= 0:
        layout.sequences.append(Sequence(name, y, x))

    report.info(
        "layoutSequences: Generated %d sequences", len(layout.sequences),
    )
    return layout


def parse_angle(text: str) -> int | float | None:
    """
    Parse an angle directory name in degrees.

    Only plain decimals such as ``90``, ``-45`` or ``22.5`` are accepted.
    Integral values come back as ``int``. Returns None for anything else.
    """
    if not _ANGLE_RE.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


@dataclass(slots=True)
class _AnimationGroup:
    name: str
    angles: dict[int | float, list[PathInfo]] = field(default_factory=dict)


def _classify_animation_path(
    path_info: PathInfo,
    *,
    long_names: bool,
) -> tuple[str, str, int | float] | str:
    """Return (group key, name, angle) or a reason the path is unusable."""
    dirnames = path_info.dirnames
    if not dirnames:
        return "has no angle directory"
    angle = parse_angle(dirnames[-1])
    if angle is None:
        return f'has an invalid angle "{dirnames[-1]}"'
    name_parts = dirnames[:-1]
    if not name_parts or not name_parts[-1]:
        return "has no animation name directory"
    key = NAME_SEPARATOR.join(name_parts)
    name = key if long_names else name_parts[-1]
    return key, name, angle


def layout_animations(
    path_infos: SequenceT[PathInfo],
    *,
    long_names: bool = False,
    reporter: Reporter | None = None,
) -> AnimationLayout:
    """
    Lay images out one row per animation angle.

    Each input is read as ``.../<animation>/<angle>/<frame>``: the
    innermost directory is the angle in degrees and the directories above
    it name the animation. Animations are ordered naturally by their
    directory chain and angles numerically; frames keep input order.
    Inputs that do not fit the shape are skipped with a warning.

    For example, this tree::

        anim1/0/frame1.png  anim1/90/frame1.png
        anim2/0/frame1.png

    gives three rows: ``anim1@0``, ``anim1@90`` and ``anim2@0``.
    """
    report = resolve_reporter(reporter)
    report.info("layoutAnimations: Laying out %d images", len(path_infos))

    layout = AnimationLayout()
    groups: dict[str, _AnimationGroup] = {}
    for path_info in path_infos:
        parsed = _classify_animation_path(path_info, long_names=long_names)
        if isinstance(parsed, str):
            report.warning('Path "%s" %s, skipping', path_info.path, parsed)
            layout.skipped.append((path_info.path, parsed))
            continue

        key, name, angle = parsed
        group = groups.setdefault(key, _AnimationGroup(name))
        group.angles.setdefault(angle, []).append(path_info)

    for key in NaturalSorter().sort(groups):
        group = groups[key]
        animation = Animation(group.name)
        for angle in sorted(group.angles):
            frames = group.angles[angle]
            y = len(layout.tileset)
            for x, path_info in enumerate(frames):
                layout.place(path_info, x, y, long_names=long_names)
            animation.angles.append(AngleSequence(angle, y, len(frames)))
        layout.animations.append(animation)

    report.info(
        "layoutAnimations: Generated %d animations", len(layout.animations),
    )
    return layout


def layout_paths(
    mode: LayoutMode | str,
    path_infos: SequenceT[PathInfo],
    *,
    width: int = DEFAULT_LIST_WIDTH,
    long_names: bool = False,
    reporter: Reporter | None = None,
) -> Layout:
    """Dispatch to the layout function for ``mode``."""
    try:
        selected = LayoutMode(mode)
    except ValueError as exc:
        msg = f'Invalid layout mode "{mode}"'
        raise ConfigurationError(msg, stage="layout") from exc

    if selected is LayoutMode.SEQUENCE:
        return layout_sequences(
            path_infos, long_names=long_names, reporter=reporter,
        )
    if selected is LayoutMode.ANIMATION:
        return layout_animations(
            path_infos, long_names=long_names, reporter=reporter,
        )
    return layout_list(
        path_infos, width=width, long_names=long_names, reporter=reporter,
    )


__all__ = [
    "AngleSequence",
    "Animation",
    "AnimationLayout",
    "Layout",
    "LayoutMode",
    "Sequence",
    "SequenceLayout",
    "Tile",
    "layout_animations",
    "layout_list",
    "layout_paths",
    "layout_sequences",
    "parse_angle",
    "tile_name",
]
