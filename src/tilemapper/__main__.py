"""Allow ``python -m tilemapper``."""

import sys

from tilemapper.cli import main

sys.exit(main())
