"""CLI command extensions for dropins-manager."""

from .config_commands import ConfigCommands
from .deploy_commands import DeployCommands

__all__ = [
    "ConfigCommands",
    "DeployCommands",
]
