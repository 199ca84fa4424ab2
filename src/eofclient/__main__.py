"""Allow ``python -m eofclient``."""

import sys

from eofclient.cli import main

sys.exit(main())
