"""Allow ``python -m georesolve.cli`` execution."""

import sys

from georesolve.cli.geocode import main

sys.exit(main())
