"""
Test configuration and shared fixtures for tilemapper.

This module defines reusable pytest fixtures for building image trees
on disk, recording reporter output, and wiring the shared logger into
caplog. These fixtures support all test modules in the test suite.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest
from PIL import Image

from tilemapper.config import TilemapperConfig
from tilemapper.logging_utils import logger
from tilemapper.walker import PathInfo, to_path_info


class RecordingReporter:
    """Reporter that keeps every message for later assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def _record(self, level: str, msg: str, *args: object) -> None:
        self.messages.append((level, msg % args if args else msg))

    def debug(self, msg: str, *args: object) -> None:
        self._record("debug", msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self._record("info", msg, *args)

    def warning(self, msg: str, *args: object) -> None:
        self._record("warning", msg, *args)

    def fatal(self, msg: str, *args: object) -> None:
        self._record("fatal", msg, *args)

    def at(self, level: str) -> list[str]:
        """Return the messages recorded at ``level``."""
        return [text for lvl, text in self.messages if lvl == level]


@pytest.fixture
def reporter() -> RecordingReporter:
    """Provide a fresh recording reporter."""
    return RecordingReporter()


@pytest.fixture
def cairo_available() -> None:
    """Skip when CairoSVG or the system cairo library cannot be loaded."""
    try:
        import cairosvg  # noqa: F401, PLC0415
    except (ImportError, OSError) as exc:
        pytest.skip(f"SVG rasterizing unavailable: {exc}")


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Factory that saves a solid-color image, creating parent dirs."""

    def _make(
        path: Path,
        size: tuple[int, int] = (8, 8),
        color: tuple[int, ...] | str = (255, 0, 0, 255),
        mode: str = "RGBA",
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path)
        return path

    return _make


@pytest.fixture
def image_tree(
    tmp_path: Path,
    make_image: Callable[..., Path],
) -> Callable[[Iterable[str]], Path]:
    """Create images at the given relative paths and return the root."""

    def _build(relative_paths: Iterable[str]) -> Path:
        root = tmp_path / "tree"
        root.mkdir(exist_ok=True)
        for rel in relative_paths:
            make_image(root / rel)
        return root

    return _build


@pytest.fixture
def make_path_infos(
    tmp_path: Path,
) -> Callable[[Iterable[str]], list[PathInfo]]:
    """Build PathInfo records relative to tmp_path without touching disk."""

    def _build(relative_paths: Iterable[str]) -> list[PathInfo]:
        return [to_path_info(str(tmp_path), rel) for rel in relative_paths]

    return _build


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., TilemapperConfig]:
    """
    Build TilemapperConfig instances with optional section overrides.

    The output path defaults to a file under tmp_path.
    """

    def _build(
        *,
        paths: list[str] | None = None,
        layout: dict[str, object] | None = None,
        tile: dict[str, object] | None = None,
        output: dict[str, object] | None = None,
        extensions: list[str] | None = None,
    ) -> TilemapperConfig:
        data: dict[str, object] = {
            "input": {"paths": list(paths or [])},
            "layout": dict(layout or {}),
            "tile": dict(tile or {}),
            "output": {"path": str(tmp_path / "tilemap.png"),
                       **(output or {})},
        }
        if extensions is not None:
            data["input"]["extensions"] = extensions  # type: ignore[index]
        return TilemapperConfig.model_validate(data)

    return _build


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the tilemapper logger so caplog works."""
    monkeypatch.setattr(logger, "propagate", True)
