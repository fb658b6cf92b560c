"""Allow ``python -m stickerpacks.cli`` execution."""

import sys

from stickerpacks.cli.users import main

sys.exit(main())
