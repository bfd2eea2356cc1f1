"""Tests for runtime.validation helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from tilemapper.errors import ConfigurationError
from tilemapper.runtime import validation as runtime_validation


def test_validate_input_paths_success(tmp_path: Path) -> None:
    (tmp_path / "frames").mkdir()
    runtime_validation.validate_input_paths(
        ["frames", __file__], str(tmp_path),
    )


def test_validate_input_paths_empty() -> None:
    with pytest.raises(ConfigurationError, match="No input paths"):
        runtime_validation.validate_input_paths([])


@pytest.mark.parametrize("paths", [["missing"], [__file__, "missing"]])
def test_validate_input_paths_missing(
    tmp_path: Path,
    paths: list[str],
) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        runtime_validation.validate_input_paths(paths, str(tmp_path))
    assert exc_info.value.path == "missing"
    assert "Input path not found" in str(exc_info.value)


def test_validate_input_paths_uses_cwd(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    (tmp_path / "here.png").write_bytes(b"")
    monkeypatch.chdir(tmp_path)
    runtime_validation.validate_input_paths(["here.png"])
