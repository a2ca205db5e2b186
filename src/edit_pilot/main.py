"""
Main entry point for the Edit Pilot command line.

Installed as the 'edit-pilot' console script; also runnable with
``python -m edit_pilot.main``.
"""

import sys

from .cli import parse_args, handle_cli_command


def main(argv=None) -> int:
    """Parse arguments and run the selected command."""
    try:
        args = parse_args(argv)
        return handle_cli_command(args)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())
