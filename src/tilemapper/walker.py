"""
Filesystem discovery of tile images.

Roots are expanded one directory depth at a time: every path at the
current depth is stat'ed (and listed, for directories) concurrently,
and the next depth only starts once all of them have finished. The
aggregated file list is naturally sorted before conversion to
:class:`PathInfo` records, so worker completion order never leaks into
the result.
"""

from __future__ import annotations

import os
import stat
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import PurePath
from typing import TYPE_CHECKING

from tilemapper.config_defaults import DEFAULT_EXTENSIONS
from tilemapper.constants import NAME_SEPARATOR
from tilemapper.errors import DiscoveryError
from tilemapper.logging_utils import resolve_reporter
from tilemapper.sorting import NaturalSorter

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Sequence

    from tilemapper.logging_utils import Reporter
    from tilemapper.type_defs import JSONDict


@dataclass(frozen=True, slots=True)
class PathInfo:
    """A discovered file and the pieces of its path used for grouping."""

    path: str
    dirname: str
    dirnames: tuple[str, ...]
    basename: str
    extname: str
    extname_lower: str

    @property
    def parent_name(self) -> str:
        """Immediate containing directory name."""
        if self.dirnames:
            return self.dirnames[-1]
        return os.path.basename(self.dirname)

    @property
    def joined_dirnames(self) -> str:
        """Directory chain joined with ``/``."""
        if self.dirnames:
            return NAME_SEPARATOR.join(self.dirnames)
        return self.parent_name

    def to_dict(self) -> JSONDict:
        return {
            "path": self.path,
            "dirname": self.dirname,
            "dirnames": list(self.dirnames),
            "basename": self.basename,
            "extname": self.extname,
            "extnameLower": self.extname_lower,
        }


def to_path_info(working_directory: str, file_path: str) -> PathInfo:
    """
    Build a :class:`PathInfo` for ``file_path``.

    ``dirnames`` holds the directory segments of the path relative to
    ``working_directory``; a file directly inside the working directory
    has no segments.
    """
    absolute = os.path.abspath(os.path.join(working_directory, file_path))
    relative = os.path.relpath(absolute, os.path.abspath(working_directory))

    stem, ext = os.path.splitext(os.path.basename(relative))
    extname = ext.removeprefix(".")
    dirnames = PurePath(os.path.dirname(relative)).parts

    return PathInfo(
        path=absolute,
        dirname=os.path.dirname(absolute),
        dirnames=tuple(dirnames),
        basename=stem,
        extname=extname,
        extname_lower=extname.lower(),
    )


def normalize_extensions(
    extensions: Iterable[str] | None,
) -> frozenset[str] | None:
    """Lower-case extensions and strip leading dots; empty means any."""
    if extensions is None:
        return None
    cleaned = frozenset(
        ext.strip().lower().removeprefix(".")
        for ext in extensions
        if ext.strip()
    )
    return cleaned or None


def extension_matches(
    extensions: frozenset[str] | None,
    file_path: str,
) -> bool:
    """Return True if ``file_path`` has an accepted extension."""
    if extensions is None:
        return True
    ext = os.path.splitext(file_path)[1].removeprefix(".").lower()
    return ext in extensions


@dataclass(slots=True)
class _Visit:
    """Outcome of stat'ing a single path."""

    files: list[str]
    children: list[str]


def _visit_path(
    file_path: str,
    *,
    top: bool,
    extensions: frozenset[str] | None,
    reporter: Reporter,
) -> _Visit:
    """Stat one path and list it if it is a directory."""
    try:
        mode = os.stat(file_path).st_mode
    except OSError as exc:
        msg = f"Cannot stat path: {exc.strerror or exc}"
        raise DiscoveryError(msg, path=file_path, stage="stat") from exc

    if stat.S_ISDIR(mode):
        reporter.debug('walk: Walking directory "%s"', file_path)
        try:
            names = os.listdir(file_path)
        except OSError as exc:
            msg = f"Cannot list directory: {exc.strerror or exc}"
            raise DiscoveryError(
                msg, path=file_path, stage="listdir",
            ) from exc
        return _Visit([], [os.path.join(file_path, name) for name in names])

    if stat.S_ISREG(mode):
        # Explicit file roots bypass the extension filter
        if not top and not extension_matches(extensions, file_path):
            reporter.debug(
                'walk: Skipping file "%s", extensions don\'t match',
                file_path,
            )
            return _Visit([], [])
        reporter.debug('walk: Adding file "%s"', file_path)
        return _Visit([file_path], [])

    reporter.debug('walk: Skipping "%s", not a file or directory', file_path)
    return _Visit([], [])


def walk_paths(  # noqa: PLR0913
    paths: str | Sequence[str],
    extensions: Iterable[str] | None = DEFAULT_EXTENSIONS,
    working_directory: str | None = None,
    *,
    reporter: Reporter | None = None,
    max_workers: int | None = None,
) -> list[PathInfo]:
    """
    Recursively search one or more paths for image files.

    Args:
        paths: A path or list of paths (files or directories), relative
            to ``working_directory``.
        extensions: Accepted extensions, matched case-insensitively.
            ``None`` or an empty list accepts every file.
        working_directory: Base for relative paths and for
            ``PathInfo.dirnames``. Defaults to the process cwd.
        reporter: Destination for progress messages.
        max_workers: Thread pool size for concurrent stat/list calls.

    Returns:
        PathInfo records for every matched file in natural path order.

    Raises:
        DiscoveryError: If any path cannot be stat'ed or listed.

    """
    report = resolve_reporter(reporter)
    roots = [paths] if isinstance(paths, str) else list(paths)
    wd = os.path.abspath(working_directory or os.getcwd())
    accepted = normalize_extensions(extensions)

    report.info('walk: Running on paths "%s"', ",".join(roots))

    found: list[str] = []
    frontier = [(os.path.abspath(os.path.join(wd, root)), True)
                for root in roots]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        while frontier:
            visits = executor.map(
                lambda item: _visit_path(
                    item[0],
                    top=item[1],
                    extensions=accepted,
                    reporter=report,
                ),
                frontier,
            )
            next_frontier: list[tuple[str, bool]] = []
            for visit in visits:
                found.extend(visit.files)
                next_frontier.extend(
                    (child, False) for child in visit.children
                )
            frontier = next_frontier

    report.info("walk: Completed, found %d files", len(found))

    # Overlapping roots may reach the same file twice
    found = list(dict.fromkeys(found))
    NaturalSorter().sort_in_place(found)
    return [to_path_info(wd, file_path) for file_path in found]


__all__ = [
    "PathInfo",
    "extension_matches",
    "normalize_extensions",
    "to_path_info",
    "walk_paths",
]
