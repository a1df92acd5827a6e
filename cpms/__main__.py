# Path: cpms/__main__.py
"""Run cpms as a module: python -m cpms."""

import sys

from cpms.main import main

sys.exit(main())
