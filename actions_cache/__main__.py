"""Allow ``python -m actions_cache``."""

import sys

from actions_cache.cli import main


sys.exit(main())
