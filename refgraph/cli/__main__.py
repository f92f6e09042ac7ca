"""Allow ``python -m refgraph.cli`` execution."""

import sys

from refgraph.cli.render import main

sys.exit(main())
