# __main__.py
# ------------
# Entry point for wifipanel when run with 'python -m wifipanel'.
# Imports and runs the main CLI logic from cli.py.
#
# Author: Jason A. Cox
# 17 October 2026
import sys

from wifipanel import __version__
from .cli import main

print(f"wifipanel {__version__}")
print()


if __name__ == "__main__":
    sys.exit(main())
