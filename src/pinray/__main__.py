"""Allow ``python -m pinray``."""

import sys

from pinray.cli import main

sys.exit(main())
