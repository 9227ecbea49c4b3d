"""Allow ``python -m mdslots``."""
import sys

from mdslots.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
