"""Allow ``python -m sqlterm``."""

import sys

from .cli import main

sys.exit(main())
