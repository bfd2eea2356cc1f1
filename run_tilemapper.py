"""
run_tilemapper.py - CLI Entry Point

This script serves as the command-line interface entry point for the
tilemapper project. It forwards execution to the modularized CLI logic
defined in `src/tilemapper/cli.py`.

Usage:
    python run_tilemapper.py path/to/frames [options]

This wrapper allows you to run the tool directly without needing to
modify PYTHONPATH or install the project as a package.

For help on available options, run:
    python run_tilemapper.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import tilemapper.cli as tm_cli

if __name__ == "__main__":
    sys.exit(tm_cli.main())
