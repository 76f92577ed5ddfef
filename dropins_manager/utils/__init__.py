"""Utility functions for dropins-manager."""

from .paths import (
    CARBON_HOME_ENV,
    dropins_directory,
    get_carbon_home,
    is_file_url,
    registry_directory,
    resolve_path,
)

__all__ = [
    "CARBON_HOME_ENV",
    "dropins_directory",
    "get_carbon_home",
    "is_file_url",
    "registry_directory",
    "resolve_path",
]
