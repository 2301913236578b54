#!/usr/bin/env python3
"""
UHTML Image Extraction — Entry Point.

Usage:
    python main.py book.uhtml                 # one file → ./book/
    python main.py book.uhtml -o out/         # one file → out/
    python main.py library/ -r                # every .uhtml under library/
    python main.py library/ -r -j 4 --all     # 4 processes, keep tiny images
"""

import sys

from picsparse.cli import main


if __name__ == "__main__":
    sys.exit(main())
