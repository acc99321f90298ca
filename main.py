#!/usr/bin/env python3
"""
Main script to analyze an old YouTube video and build a content revival plan.
Uses the pipeline in src/content_revival; run from project root.
"""

import sys
from pathlib import Path

# Ensure src is on path when running from a checkout without installing
_SRC = Path(__file__).resolve().parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


def main():
    from content_revival.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
