"""Allow running Todo Keeper with ``python -m todo_keeper``."""

import sys

from todo_keeper.cli import main

sys.exit(main())
