import sys

from content_revival.cli import main

if __name__ == "__main__":
    sys.exit(main())
