"""Allow ``python -m claude_session_cast``."""

import sys

from claude_session_cast.cli import main

sys.exit(main())
