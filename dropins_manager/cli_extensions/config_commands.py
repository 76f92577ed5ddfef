"""CLI commands for managing configuration."""

import argparse
import sys

import yaml

from dropins_manager.config import Config, ConfigError
from dropins_manager.output import MessageType, VerbosityLevel, message


class ConfigCommands:
    """Manages configuration-related CLI commands."""

    @staticmethod
    def add_cli_arguments(subparsers) -> None:
        """Add config subcommands to the argument parser.

        Args:
            subparsers: The subparsers object to add commands to
        """
        config_parser = subparsers.add_parser("config", help="Manage configuration")
        config_subparsers = config_parser.add_subparsers(dest="config_command", help="Configuration commands")

        # config show
        config_subparsers.add_parser(
            "show",
            help="Display current configuration",
            description="Display the configuration file and the locations resolved from it.",
        )

        # config validate
        config_subparsers.add_parser(
            "validate",
            help="Validate configuration",
            description="Validate the configuration file and check that the resolved directories exist.",
        )

        # config template
        config_subparsers.add_parser(
            "template",
            help="Dump a starter configuration template to stdout",
            description="Print a commented YAML template to stdout that can be redirected to a config file.",
        )

        # config where
        config_subparsers.add_parser(
            "where",
            help="Show configuration file location",
            description="Show the file paths for the configuration file and config directory.",
        )

        # config init
        init_parser = config_subparsers.add_parser(
            "init",
            help="Create the configuration file from the template",
            description="Write the commented template to the configuration file.",
        )
        init_parser.add_argument("--force", action="store_true", help="Overwrite an existing configuration file")

    @staticmethod
    def process_cli_command(args: argparse.Namespace, config: Config) -> None:
        """Process config CLI commands.

        Args:
            args: Parsed command-line arguments
            config: Config instance to operate on
        """
        if args.config_command is None:
            message("Usage: dropins-manager config <command>", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("Available commands:", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  show       Display current configuration", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  validate   Validate configuration", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  template   Dump starter template to stdout", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  where      Show configuration file location", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  init       Create the configuration file", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            return
        elif args.config_command == "show":
            ConfigCommands.display(config)
        elif args.config_command == "validate":
            ConfigCommands.validate_all(config)
        elif args.config_command == "template":
            ConfigCommands.template()
        elif args.config_command == "where":
            ConfigCommands.show_location(config)
        elif args.config_command == "init":
            config.initialize(force=getattr(args, "force", False))
        else:
            message("Unknown config command", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    @staticmethod
    def display(config: Config) -> None:
        """Display the configuration and the resolved locations.

        Args:
            config: Config instance
        """
        config_data = config.read()

        message("\n=== Configuration ===\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        if config_data:
            message(
                yaml.dump(dict(config_data), default_flow_style=False, sort_keys=False).rstrip(),
                MessageType.NORMAL,
                VerbosityLevel.ALWAYS,
            )
        else:
            message("  (no configuration file, using defaults)", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        message("\n=== Resolved locations ===\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        try:
            settings = Config.build_settings(config_data)
        except ConfigError as e:
            message(f"  {e}", MessageType.WARNING, VerbosityLevel.ALWAYS)
            return

        message(f"  Dropins directory:  {settings.dropins_directory}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"  Registry file:      {settings.registry_file}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"  Snapshot file:      {settings.snapshot_file}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"  Temp directory:     {settings.temp_directory}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"  Location prefix:    {settings.location_prefix}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"  Start level:        {settings.start_level}", MessageType.NORMAL, VerbosityLevel.ALWAYS)

    @staticmethod
    def validate_all(config: Config) -> None:
        """Validate the configuration and the directories it resolves to.

        Args:
            config: Config instance
        """
        config_data = config.read()

        try:
            settings = Config.build_settings(config_data)
        except ConfigError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

        problems = []
        if not settings.dropins_directory.is_dir():
            problems.append(f"Dropins directory does not exist: {settings.dropins_directory}")
        if not settings.registry_file.is_file():
            problems.append(f"Registry file does not exist: {settings.registry_file}")
        if not settings.temp_directory.is_dir():
            problems.append(f"Temp directory does not exist: {settings.temp_directory}")

        for problem in problems:
            message(f"Warning: {problem}", MessageType.WARNING, VerbosityLevel.ALWAYS)

        if problems:
            message("Configuration is valid, but some locations are missing", MessageType.WARNING, VerbosityLevel.ALWAYS)
        else:
            message("Configuration is valid", MessageType.SUCCESS, VerbosityLevel.ALWAYS)

    @staticmethod
    def template() -> None:
        """Print the configuration template to stdout."""
        message(Config.generate_template(), MessageType.NORMAL, VerbosityLevel.ALWAYS)

    @staticmethod
    def show_location(config: Config) -> None:
        """Show the configuration file location.

        Args:
            config: Config instance
        """
        message(f"Config directory: {config.config_directory}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"Config file:      {config.config_file}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        if not config.exists():
            message("  (file does not exist yet)", MessageType.NORMAL, VerbosityLevel.ALWAYS)
