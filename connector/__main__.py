"""Allow ``python -m connector guacd_<protocol>.json``."""

import sys

from connector.app import main

sys.exit(main())
