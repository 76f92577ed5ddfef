#!/usr/bin/env python

"""Dropins deployer for OSGi bundles.info."""

import argparse
import sys

from dropins_manager.cli_extensions import ConfigCommands, DeployCommands
from dropins_manager.config import Config
from dropins_manager.output import MessageType, VerbosityLevel, get_output, message

# Grouped command help text
COMMAND_GROUPS = """
runtime commands:
  deploy              Update bundles.info with the dropins directory
  scan                List dropins bundles without writing anything

configuration file commands:
  config              Manage the configuration file
"""


class GroupedHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that hides the subparser choices from positional arguments."""

    def _format_action(self, action):
        # Subcommands are listed in the epilog
        if isinstance(action, argparse._SubParsersAction):
            return ""
        return super()._format_action(action)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="dropins-manager",
        description="Keep the OSGi bundles.info in line with the dropins directory",
        formatter_class=GroupedHelpFormatter,
        epilog=COMMAND_GROUPS,
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase verbosity (-v, -vv, -vvv)",
    )
    parser.add_argument(
        "--no-color", action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    DeployCommands.add_cli_arguments(subparsers)    # deploy + scan
    ConfigCommands.add_cli_arguments(subparsers)    # config

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the dropins-manager CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure output system
    output_mgr = get_output()
    output_mgr.verbosity = args.verbose
    output_mgr.use_color = not args.no_color and sys.stdout.isatty()

    message(
        f"Verbosity level: {args.verbose}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )
    message(
        f"Command: {args.command}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )

    config = Config()

    if args.command is None:
        parser.print_help()
        return

    if args.command == "config":
        ConfigCommands.process_cli_command(args, config)
        return

    if args.command in ("deploy", "scan"):
        DeployCommands.process_cli_command(args, config)
        return

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
