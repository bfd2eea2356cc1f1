"""Shared default values for user-facing configuration settings."""
from tilemapper.type_defs import FitName, KernelName, LayoutName

# Input discovery
DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "png", "jpg", "jpeg", "gif", "webp", "tiff", "svg",
)

# Layout
DEFAULT_LAYOUT: LayoutName = "list"
DEFAULT_LIST_WIDTH = 64
DEFAULT_LONG_NAMES = False

# Tiles
DEFAULT_TILE_WIDTH = 128
DEFAULT_TILE_HEIGHT = 128
DEFAULT_MIN_COUNT_X = 0
DEFAULT_MIN_COUNT_Y = 0
DEFAULT_FIT: FitName = "cover"
DEFAULT_KERNEL: KernelName = "nearest"

# Output
DEFAULT_OUTPUT_PATH = "tilemap.png"
