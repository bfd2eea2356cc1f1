"""Version lookup for ``--version`` output."""

from __future__ import annotations

from importlib import metadata as importlib_metadata
from pathlib import Path

import tomlkit
from tomlkit.exceptions import ParseError

from tilemapper.constants import DISTRIBUTION_NAMES
from tilemapper.logging_utils import logger

UNKNOWN_VERSION = "0.0.0"


def installed_version() -> str | None:
    """Return the version of the first installed tilemapper distribution."""
    for name in DISTRIBUTION_NAMES:
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            continue
    return None


def source_tree_version(start: Path) -> str | None:
    """
    Read ``project.version`` from the pyproject.toml nearest ``start``.

    Only the closest pyproject.toml is consulted; a missing or blank
    version there yields None rather than searching further up.
    """
    pyproject = next(
        (
            parent / "pyproject.toml"
            for parent in start.parents
            if (parent / "pyproject.toml").is_file()
        ),
        None,
    )
    if pyproject is None:
        return None

    try:
        data = tomlkit.parse(pyproject.read_text(encoding="utf-8")).unwrap()
    except (OSError, ParseError) as exc:
        logger.warning("Error reading %s: %s", pyproject, exc)
        return None

    version = data.get("project", {}).get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None


def resolve_project_version() -> str:
    """
    Return the installed version, else the source checkout's version.

    Falls back to ``0.0.0`` when running from an unpackaged copy.
    """
    return (
        installed_version()
        or source_tree_version(Path(__file__).resolve())
        or UNKNOWN_VERSION
    )
