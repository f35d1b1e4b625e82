"""Allow ``python -m gitversioning``."""

import sys

from .cli import main

sys.exit(main())
