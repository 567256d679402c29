"""
Entry point for the Byzer shell.

Usage:
    python -m byzershell
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
