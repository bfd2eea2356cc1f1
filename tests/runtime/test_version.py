"""Tests for runtime.version helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from tilemapper.runtime import version as runtime_version


@pytest.fixture
def not_installed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every distribution lookup fail."""

    def raise_missing(_: str) -> None:
        raise runtime_version.importlib_metadata.PackageNotFoundError

    monkeypatch.setattr(
        runtime_version.importlib_metadata, "version", raise_missing,
    )


def test_installed_version_wins(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        runtime_version.importlib_metadata,
        "version",
        lambda _name: "9.9.9",
    )
    (tmp_path / "pyproject.toml").write_text(
        "[project]\nversion = '1.0.0'\n", encoding="utf-8",
    )
    monkeypatch.setattr(
        runtime_version, "__file__", str(tmp_path / "pkg" / "version.py"),
    )
    assert runtime_version.resolve_project_version() == "9.9.9"


@pytest.mark.usefixtures("not_installed")
def test_installed_version_missing() -> None:
    assert runtime_version.installed_version() is None


def test_source_tree_version_strips(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[project]\nversion = ' 1.2.3 '\n", encoding="utf-8",
    )
    start = tmp_path / "src" / "pkg" / "version.py"
    assert runtime_version.source_tree_version(start) == "1.2.3"


def test_nearest_pyproject_is_used(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[project]\nversion = '2.0.0'\n", encoding="utf-8",
    )
    inner = tmp_path / "inner"
    inner.mkdir()
    (inner / "pyproject.toml").write_text(
        "[project]\nname = 'demo'\n", encoding="utf-8",
    )
    start = inner / "pkg" / "version.py"
    assert runtime_version.source_tree_version(start) is None


def test_malformed_pyproject_warns(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[project\nversion = ", encoding="utf-8",
    )
    with caplog.at_level("WARNING"):
        result = runtime_version.source_tree_version(tmp_path / "x.py")
    assert result is None
    assert any("Error reading" in rec.message for rec in caplog.records)


@pytest.mark.usefixtures("not_installed")
def test_resolve_from_source_tree(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[project]\nversion = '1.2.3'\n", encoding="utf-8",
    )
    monkeypatch.setattr(
        runtime_version, "__file__", str(tmp_path / "pkg" / "version.py"),
    )
    assert runtime_version.resolve_project_version() == "1.2.3"


@pytest.mark.usefixtures("not_installed")
def test_resolve_falls_back_to_unknown(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[project]\nname = 'demo'\n", encoding="utf-8",
    )
    monkeypatch.setattr(
        runtime_version, "__file__", str(tmp_path / "pkg" / "version.py"),
    )
    assert runtime_version.resolve_project_version() == "0.0.0"
