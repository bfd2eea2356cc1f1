"""
Configuration schema and loader for tilemapper.

Defines Pydantic models representing structured configuration sections,
a TOML-based config loader with validation support, and the merge of
command-line overrides on top of a loaded file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, field_validator
from tomlkit.exceptions import ParseError

from tilemapper.compositor import (
    OutputType,
    parse_fit,
    parse_kernel,
    parse_output_type,
)
from tilemapper.config_defaults import (
    DEFAULT_EXTENSIONS,
    DEFAULT_FIT,
    DEFAULT_KERNEL,
    DEFAULT_LAYOUT,
    DEFAULT_LIST_WIDTH,
    DEFAULT_LONG_NAMES,
    DEFAULT_MIN_COUNT_X,
    DEFAULT_MIN_COUNT_Y,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_TILE_HEIGHT,
    DEFAULT_TILE_WIDTH,
)
from tilemapper.errors import ConfigurationError
from tilemapper.type_defs import (
    FitName,
    KernelName,
    LayoutName,
    OutputTypeName,
)


class InputConfig(BaseModel):
    """Select input paths and the extensions accepted while walking."""

    paths: list[str] = Field(default_factory=list)
    extensions: list[str] | None = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            cleaned = [str(ext).strip() for ext in value if str(ext).strip()]
            return cleaned or None
        return value


class LayoutConfig(BaseModel):
    """Choose the layout policy and its naming options."""

    mode: LayoutName = Field(DEFAULT_LAYOUT)
    list_width: int = Field(DEFAULT_LIST_WIDTH, ge=1)
    long_names: bool = DEFAULT_LONG_NAMES


class TileConfig(BaseModel):
    """Control tile size, grid minimums, and resizing."""

    width: int = Field(DEFAULT_TILE_WIDTH, ge=1)
    height: int = Field(DEFAULT_TILE_HEIGHT, ge=1)
    min_count_x: int = Field(DEFAULT_MIN_COUNT_X, ge=0)
    min_count_y: int = Field(DEFAULT_MIN_COUNT_Y, ge=0)
    fit: FitName = Field(DEFAULT_FIT)
    kernel: KernelName = Field(DEFAULT_KERNEL)

    @field_validator("fit", mode="before")
    @classmethod
    def _normalize_fit(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            return parse_fit(value).value
        return value

    @field_validator("kernel", mode="before")
    @classmethod
    def _normalize_kernel(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            return parse_kernel(value).value
        return value


class OutputConfig(BaseModel):
    """
    Configure where and how the tilemap is written.

    ``json`` is either a flag (derive the side-file name from ``path``)
    or an explicit path for the JSON side-file.
    """

    path: str = Field(DEFAULT_OUTPUT_PATH)
    type: OutputTypeName | None = None
    json_path: bool | str = Field(False, alias="json")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            return parse_output_type(value).value
        return value

    def resolve_output_type(self) -> OutputType:
        """Return the explicit type, else infer it from the extension."""
        if self.type is not None:
            return OutputType(self.type)
        ext = Path(self.path).suffix.lower().removeprefix(".")
        if ext in {"jpg", "jpeg"}:
            return OutputType.JPEG
        if ext == "webp":
            return OutputType.WEBP
        if ext in {"tiff", "tif"}:
            return OutputType.TIFF
        return OutputType.PNG

    def resolve_json_path(self) -> str | None:
        """Return the JSON side-file path, or None when disabled."""
        if isinstance(self.json_path, str):
            return self.json_path or None
        if not self.json_path:
            return None
        image_path = Path(os.path.abspath(self.path))
        return str(image_path.with_name(f"{image_path.stem}.json"))


class TilemapperConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of a tilemapper TOML file, grouping related
    parameters under logical categories.
    """

    input: InputConfig = Field(
        default_factory=lambda: InputConfig.model_validate({}),
    )
    layout: LayoutConfig = Field(
        default_factory=lambda: LayoutConfig.model_validate({}),
    )
    tile: TileConfig = Field(
        default_factory=lambda: TileConfig.model_validate({}),
    )
    output: OutputConfig = Field(
        default_factory=lambda: OutputConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> TilemapperConfig:
        """
        Load a tilemapper configuration from a TOML file.

        Returns a validated TilemapperConfig instance based on the file
        contents. A file that is not valid TOML raises
        ConfigurationError.
        """
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            try:
                doc = tomlkit.load(f)
            except ParseError as exc:
                msg = f"Invalid TOML in config file: {exc}"
                raise ConfigurationError(
                    msg, path=path, stage="config",
                ) from exc

        return TilemapperConfig.model_validate(doc.unwrap())


# CLI namespace key -> (config section, field)
_CLI_FIELDS: dict[str, tuple[str, str]] = {
    "paths": ("input", "paths"),
    "extensions": ("input", "extensions"),
    "layout": ("layout", "mode"),
    "list_length": ("layout", "list_width"),
    "long_names": ("layout", "long_names"),
    "width": ("tile", "width"),
    "height": ("tile", "height"),
    "min_x": ("tile", "min_count_x"),
    "min_y": ("tile", "min_count_y"),
    "fit": ("tile", "fit"),
    "kernel": ("tile", "kernel"),
    "output": ("output", "path"),
    "output_type": ("output", "type"),
    "output_json": ("output", "json"),
}


def build_config_from_cli(
    args: dict[str, Any],
    base_config: TilemapperConfig | None = None,
) -> TilemapperConfig:
    """
    Overlay command-line values onto ``base_config`` (or the defaults).

    Keys that are missing or ``None`` leave the base value untouched, as
    do empty path lists and ``False`` for ``long_names`` so a flag that
    was not passed cannot switch off a value set in the file.
    """
    base = base_config or TilemapperConfig()
    data = base.model_dump(by_alias=True)

    for key, (section, field_name) in _CLI_FIELDS.items():
        value = args.get(key)
        if value is None:
            continue
        if key == "paths" and not value:
            continue
        if key == "long_names" and value is False:
            continue
        data[section][field_name] = value

    return TilemapperConfig.model_validate(data)
