"""
Command-line argument parser for Edit Pilot.
"""

import argparse

from .. import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="edit-pilot",
        description="Edit Pilot - drive an editor with natural-language instructions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  edit-pilot --prompt "go to line 25"            # Run one instruction on ./
  edit-pilot --workspace ~/src/app --interactive # Instruction loop
  edit-pilot --url http://localhost:1234 --prompt "open main.py"
  edit-pilot --interpret '{"command": "toggleSidebar", "parameters": {}}'
  edit-pilot --list-commands                     # Show the command catalog
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Edit Pilot {__version__}"
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    # Completion service
    parser.add_argument(
        "--url",
        type=str,
        metavar="URL",
        help="Completion service base URL (http:// or https://)"
    )

    parser.add_argument(
        "--model",
        type=str,
        metavar="NAME",
        help="Model name sent with each request"
    )

    parser.add_argument(
        "--workspace",
        type=str,
        metavar="DIR",
        default=".",
        help="Directory loaded into the headless editor (default: current directory)"
    )

    # Modes (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()

    mode_group.add_argument(
        "--prompt",
        type=str,
        metavar="TEXT",
        help="Run a single instruction and exit"
    )

    mode_group.add_argument(
        "--interactive", "-i",
        action="store_true",
        help="Read instructions from the terminal until 'exit'"
    )

    mode_group.add_argument(
        "--interpret",
        type=str,
        metavar="TEXT",
        help="Interpret a raw model response offline and print the command"
    )

    mode_group.add_argument(
        "--list-commands",
        action="store_true",
        help="List the commands the model may choose from"
    )

    mode_group.add_argument(
        "--show-prompt",
        action="store_true",
        help="Print the system prompt sent to the model"
    )

    return parser


def parse_args(args=None):
    """Parse command line arguments."""
    parser = create_parser()
    return parser.parse_args(args)
