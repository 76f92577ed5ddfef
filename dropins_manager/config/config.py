"""Configuration management class for dropins-manager.

The configuration file is optional. Every key has a default except the
server home, which may also come from the ``CARBON_HOME`` environment
variable or the command line.
"""

import sys
import tempfile
from pathlib import Path
from typing import Any, TypedDict

import yaml

from dropins_manager.core import DEFAULT_LOCATION_PREFIX, DEFAULT_START_LEVEL, DeployerSettings
from dropins_manager.output import MessageType, VerbosityLevel, message
from dropins_manager.utils import dropins_directory, get_carbon_home, registry_directory, resolve_path

DEFAULT_PROFILE = "default"

_PATH_KEYS = ("carbon_home", "dropins_directory", "registry_directory", "temp_directory")
_STRING_KEYS = ("profile", "location_prefix")
_INT_KEYS = ("start_level", "max_workers")


class ConfigData(TypedDict, total=False):
    """Type definition for the configuration structure."""

    carbon_home: str
    profile: str
    dropins_directory: str
    registry_directory: str
    temp_directory: str
    location_prefix: str
    start_level: int
    max_workers: int


class ConfigError(Exception):
    """Exception raised for configuration validation errors.

    Can contain multiple error messages.
    """

    def __init__(self, errors: str | list[str]):
        """Initialize ConfigError.

        Args:
            errors: Single error message or list of error messages
        """
        if isinstance(errors, str):
            self.errors = [errors]
        else:
            self.errors = errors
        super().__init__(self._format_errors())

    def _format_errors(self) -> str:
        """Format errors for display."""
        if len(self.errors) == 1:
            return self.errors[0]
        else:
            error_list = "\n".join(f"  - {err}" for err in self.errors)
            return f"Configuration has {len(self.errors)} errors:\n{error_list}"


class Config:
    """Manages configuration for dropins-manager."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the Config manager.

        Args:
            config_dir: Optional custom config directory.
                       Defaults to ~/.dropins-manager
        """
        if config_dir is None:
            config_dir = Path.home() / ".dropins-manager"

        self.config_directory = config_dir
        self.config_file = self.config_directory / "config.yaml"

    def ensure_directories(self) -> None:
        """Create the config directory if it doesn't exist.

        Raises:
            SystemExit: If the directory cannot be created
        """
        try:
            self.config_directory.mkdir(parents=True, exist_ok=True)
            message(f"Ensured config directory exists: {self.config_directory}", MessageType.DEBUG, VerbosityLevel.DEBUG)
        except PermissionError:
            message(
                f"Permission denied creating config directory: {self.config_directory}",
                MessageType.ERROR,
                VerbosityLevel.ALWAYS,
            )
            sys.exit(1)
        except OSError as e:
            message(f"Failed to create config directory: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    @staticmethod
    def validate(config: dict[str, Any]) -> list[str]:
        """Validate the configuration structure.

        Collects all validation errors before raising an exception.

        Args:
            config: The configuration dictionary to validate

        Returns:
            List of warnings (non-fatal issues)

        Raises:
            ConfigError: If the configuration is invalid, with all errors
        """
        errors: list[str] = []
        warnings: list[str] = []

        known = set(_PATH_KEYS) | set(_STRING_KEYS) | set(_INT_KEYS)
        for key in config:
            if key not in known:
                warnings.append(f"Unknown configuration key '{key}' is ignored")

        for key in _PATH_KEYS + _STRING_KEYS:
            if key not in config:
                continue
            value = config[key]
            if not isinstance(value, str):
                errors.append(f"'{key}' must be a string, got {type(value).__name__}")
            elif not value.strip():
                errors.append(f"'{key}' cannot be empty")

        for key in _INT_KEYS:
            if key not in config:
                continue
            value = config[key]
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"'{key}' must be an integer, got {type(value).__name__}")
            elif value < 1:
                errors.append(f"'{key}' must be a positive integer")

        prefix = config.get("location_prefix")
        if isinstance(prefix, str) and "," in prefix:
            errors.append("'location_prefix' cannot contain a comma")

        if errors:
            raise ConfigError(errors)

        return warnings

    def exists(self) -> bool:
        """Check if the configuration file exists.

        Returns:
            True if config file exists, False otherwise
        """
        return self.config_file.exists()

    def read(self) -> ConfigData:
        """Load the configuration file with error handling.

        A missing or empty file yields an empty configuration.

        Returns:
            The loaded and validated configuration dictionary

        Raises:
            SystemExit: If the file cannot be read or the config is invalid
        """
        if not self.exists():
            message(f"No configuration file at {self.config_file}, using defaults", MessageType.DEBUG, VerbosityLevel.DEBUG)
            return {}

        try:
            with open(self.config_file) as f:
                config = yaml.safe_load(f)
            if config is None:
                return {}
            if not isinstance(config, dict):
                raise ConfigError("Configuration file must contain a mapping")

            warnings = self.validate(config)
            for warning in warnings:
                message(f"Warning: {warning}", MessageType.WARNING, VerbosityLevel.ALWAYS)

            message(f"Configuration loaded from {self.config_file}", MessageType.DEBUG, VerbosityLevel.DEBUG)
            return config
        except ConfigError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except yaml.YAMLError as e:
            message(f"Failed to parse configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except OSError as e:
            message(f"Failed to read configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    def write(self, config: ConfigData) -> None:
        """Write the configuration to the config file with validation.

        Args:
            config: The configuration dictionary to write

        Raises:
            SystemExit: If validation fails or file cannot be written
        """
        try:
            self.validate(config)
            with open(self.config_file, "w") as f:
                yaml.dump(dict(config), f, default_flow_style=False, sort_keys=False)
            message(f"Configuration saved to {self.config_file}", MessageType.SUCCESS, VerbosityLevel.ALWAYS)
        except ConfigError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except OSError as e:
            message(f"Failed to write configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    def initialize(self, force: bool = False) -> bool:
        """Write the configuration template.

        Args:
            force: Overwrite an existing configuration file

        Returns:
            True if the template was written, False if a file already exists
        """
        if self.exists() and not force:
            message(f"Configuration file already exists: {self.config_file}", MessageType.WARNING, VerbosityLevel.ALWAYS)
            return False

        self.ensure_directories()
        try:
            self.config_file.write_text(self.generate_template())
        except OSError as e:
            message(f"Failed to write configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        message(f"Configuration template written to {self.config_file}", MessageType.SUCCESS, VerbosityLevel.ALWAYS)
        return True

    @staticmethod
    def build_settings(
        config: ConfigData,
        carbon_home: str | Path | None = None,
        profile: str | None = None,
    ) -> DeployerSettings:
        """Resolve the settings of a deployment run.

        The server home is taken from *carbon_home*, then the config, then
        the ``CARBON_HOME`` environment variable. Explicit directory keys in
        the config override the locations derived from it.

        Args:
            config: Loaded configuration
            carbon_home: Server home given on the command line
            profile: Profile given on the command line

        Returns:
            DeployerSettings for the run

        Raises:
            ConfigError: If the server home cannot be determined
        """
        if carbon_home is not None:
            home = resolve_path(carbon_home)
        elif "carbon_home" in config:
            home = resolve_path(config["carbon_home"])
        else:
            home = get_carbon_home()

        needs_home = "dropins_directory" not in config or "registry_directory" not in config
        if home is None and needs_home:
            raise ConfigError(
                "Server home is not set. Use --carbon-home, 'carbon_home' in the config, "
                "or the CARBON_HOME environment variable"
            )

        profile = profile or config.get("profile", DEFAULT_PROFILE)

        if "dropins_directory" in config:
            dropins = resolve_path(config["dropins_directory"])
        else:
            dropins = dropins_directory(home)

        if "registry_directory" in config:
            registry = resolve_path(config["registry_directory"])
        else:
            registry = registry_directory(home, profile)

        if "temp_directory" in config:
            temp = resolve_path(config["temp_directory"])
        else:
            temp = Path(tempfile.gettempdir())

        return DeployerSettings(
            dropins_directory=dropins,
            registry_directory=registry,
            temp_directory=temp,
            location_prefix=config.get("location_prefix", DEFAULT_LOCATION_PREFIX),
            start_level=config.get("start_level", DEFAULT_START_LEVEL),
            max_workers=config.get("max_workers"),
        )

    @staticmethod
    def generate_template() -> str:
        """Generate a commented YAML template for a new configuration.

        Returns:
            Template string suitable for writing to stdout or a file
        """
        return """# dropins-manager configuration

# Server installation. Falls back to the CARBON_HOME environment variable.
carbon_home: /opt/wso2/carbon

# Runtime profile whose bundles.info is updated
profile: default

# Optional overrides of the derived locations
# dropins_directory: /opt/wso2/carbon/osgi/dropins
# registry_directory: /opt/wso2/carbon/osgi/default/configuration/org.eclipse.equinox.simpleconfigurator
# temp_directory: /tmp

# Location of the dropins directory relative to the registry directory
# location_prefix: ../../dropins

# Start level of dropins bundles
# start_level: 4

# Threads used to read bundle manifests
# max_workers: 8
"""
