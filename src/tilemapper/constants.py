"""
Constants used internally by tilemapper.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

# Canvas background for the composited tilemap (fully transparent)
COLOR_TRANSPARENT = (0, 0, 0, 0)
# Background used when flattening alpha for formats without transparency
COLOR_WHITE = (255, 255, 255)

COLOR_MODE_RGB = "RGB"
COLOR_MODE_RGBA = "RGBA"

# Intermediate encoding for resized tiles
TILE_BUFFER_FORMAT = "PNG"

# Separator used when joining directory segments into names
NAME_SEPARATOR = "/"

# JSON side-file indentation
JSON_INDENT = "\t"

# Distribution names checked when resolving the installed version
DISTRIBUTION_NAMES = ("tilemapper",)

# Vector tiles are rasterized before resizing
SVG_EXTENSION = ".svg"
