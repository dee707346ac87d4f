"""Allow ``python -m branch_rotator``."""

import sys

from .cli import main

sys.exit(main())
