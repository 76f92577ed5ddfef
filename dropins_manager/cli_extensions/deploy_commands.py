"""CLI commands for deploying dropins bundles."""

import argparse
import sys

from dropins_manager.config import Config, ConfigError
from dropins_manager.core import DeployerSettings, DropinsDeployer, needs_reconciliation
from dropins_manager.output import MessageType, VerbosityLevel, message


class DeployCommands:
    """Manages CLI commands that run against the dropins directory."""

    @staticmethod
    def _add_location_arguments(parser) -> None:
        parser.add_argument("--carbon-home", metavar="PATH", help="Server home (defaults to config or $CARBON_HOME)")
        parser.add_argument("--profile", metavar="NAME", help="Runtime profile (defaults to config or 'default')")

    @staticmethod
    def add_cli_arguments(subparsers) -> None:
        """Add deploy and scan commands.

        Args:
            subparsers: The argparse subparsers to add to
        """
        deploy_parser = subparsers.add_parser(
            "deploy",
            help="Update bundles.info with the bundles in the dropins directory",
            description="Scan the dropins directory and, if it changed since the last run, "
            "reconcile bundles.info with it.",
        )
        DeployCommands._add_location_arguments(deploy_parser)

        scan_parser = subparsers.add_parser(
            "scan",
            help="List the bundles in the dropins directory",
            description="Show the bundles found in the dropins directory and whether a deploy would "
            "update bundles.info. Nothing is written.",
        )
        DeployCommands._add_location_arguments(scan_parser)

    @staticmethod
    def resolve_settings(args: argparse.Namespace, config: Config) -> DeployerSettings:
        """Build the deployer settings from the config and command-line overrides.

        Raises:
            SystemExit: If the configuration is incomplete
        """
        try:
            return Config.build_settings(
                config.read(),
                carbon_home=getattr(args, "carbon_home", None),
                profile=getattr(args, "profile", None),
            )
        except ConfigError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    @staticmethod
    def process_cli_command(args: argparse.Namespace, config: Config) -> None:
        """Process deploy and scan commands.

        Args:
            args: Parsed command-line arguments
            config: Config instance
        """
        settings = DeployCommands.resolve_settings(args, config)
        deployer = DropinsDeployer(settings)

        if args.command == "deploy":
            DeployCommands.deploy(deployer)
        elif args.command == "scan":
            DeployCommands.scan(deployer)
        else:
            message(f"Unknown command: {args.command}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    @staticmethod
    def deploy(deployer: DropinsDeployer) -> None:
        """Run a deployment and report the outcome.

        Args:
            deployer: Configured deployer

        Raises:
            SystemExit: If the deployment fails
        """
        try:
            result = deployer.deploy()
        except Exception as e:
            message(
                f"An error has occurred when updating the bundles.info using the OSGi bundle information: {e}",
                MessageType.ERROR,
                VerbosityLevel.ALWAYS,
            )
            sys.exit(1)

        if not result.reconciled:
            message("bundles.info is up to date", MessageType.SUCCESS, VerbosityLevel.ALWAYS)
            return

        for bundle in result.added:
            message(f"  + {bundle.display_name}", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        if result.registry_updated:
            message(
                f"Updated {deployer.settings.registry_file} "
                f"({len(result.bundles)} dropins bundle(s), {len(result.added)} added)",
                MessageType.SUCCESS,
                VerbosityLevel.ALWAYS,
            )

    @staticmethod
    def scan(deployer: DropinsDeployer) -> None:
        """List the dropins bundles without writing anything.

        Args:
            deployer: Configured deployer
        """
        dropins = deployer.settings.dropins_directory
        if not dropins.exists():
            message(f"Dropins directory does not exist: {dropins}", MessageType.WARNING, VerbosityLevel.ALWAYS)
            return

        try:
            bundles = deployer.scan()
        except OSError as e:
            message(f"Failed to scan {dropins}: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

        message(f"\n=== Bundles in {dropins} ===\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        if not bundles:
            message("No bundles found.", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        for bundle in bundles:
            kind = " (fragment)" if bundle.is_fragment else ""
            message(f"  {bundle.symbolic_name} {bundle.version}{kind}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message(f"    {bundle.location}", MessageType.NORMAL, VerbosityLevel.VERBOSE)

        message("", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        if needs_reconciliation(bundles, deployer.settings.snapshot_file):
            message("Changes detected; 'deploy' will update bundles.info", MessageType.INFO, VerbosityLevel.ALWAYS)
        else:
            message("No changes since the last deploy", MessageType.INFO, VerbosityLevel.ALWAYS)
