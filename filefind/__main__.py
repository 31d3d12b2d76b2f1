"""Allow ``python -m filefind``."""

import sys

from filefind.cli import main

sys.exit(main())
