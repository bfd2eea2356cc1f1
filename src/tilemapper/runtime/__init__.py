"""Runtime utilities for output, validation, and version helpers."""

from .output import atomic_write, write_outputs
from .validation import validate_input_paths
from .version import resolve_project_version

__all__ = [
    "atomic_write",
    "resolve_project_version",
    "validate_input_paths",
    "write_outputs",
]
