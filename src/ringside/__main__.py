"""Allow running as: python -m ringside"""

import sys

from .cli import main

sys.exit(main())
