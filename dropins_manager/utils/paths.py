"""Path utilities for dropins-manager."""

import os
from pathlib import Path

# Environment variable pointing at the server installation
CARBON_HOME_ENV = "CARBON_HOME"


def is_file_url(url: str) -> bool:
    """Check if a value is a file:// URL.

    Args:
        url: The value to check

    Returns:
        True if it uses the file:// protocol, False otherwise
    """
    return url.startswith("file://")


def resolve_path(value: str | Path) -> Path:
    """Resolve a configured path to an absolute path.

    Accepts plain paths and file:// URLs. ``~`` and environment variables
    are expanded.

    Args:
        value: Configured path

    Returns:
        Resolved absolute Path
    """
    path_str = str(value)
    if is_file_url(path_str):
        path_str = path_str[7:]
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def get_carbon_home() -> Path | None:
    """Return the server home from the environment, if set."""
    value = os.environ.get(CARBON_HOME_ENV, "").strip()
    if not value:
        return None
    return resolve_path(value)


def registry_directory(carbon_home: Path, profile: str) -> Path:
    """Return the directory holding ``bundles.info`` for *profile*."""
    return carbon_home / "osgi" / profile / "configuration" / "org.eclipse.equinox.simpleconfigurator"


def dropins_directory(carbon_home: Path) -> Path:
    """Return the dropins directory of a server installation."""
    return carbon_home / "osgi" / "dropins"
