"""
Entry point for the Byzer shell.

Usage:
    python -m byzershell.shell
"""

import sys


def main():
    """Main entry point for the shell."""
    from ..cli import main as cli_main

    try:
        sys.exit(cli_main())
    except KeyboardInterrupt:
        print("\n\n👋 Goodbye!")
        sys.exit(0)


if __name__ == "__main__":
    main()
