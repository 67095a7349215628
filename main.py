"""ClipShelf launcher"""

import sys

from clipshelf.app import main


if __name__ == "__main__":
    sys.exit(main())
