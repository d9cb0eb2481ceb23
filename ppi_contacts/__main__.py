"""Allow running as: python -m ppi_contacts"""

import sys

from .cli import main

sys.exit(main())
