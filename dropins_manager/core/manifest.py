"""Bundle manifest reader.

Extracts OSGi identity headers from ``META-INF/MANIFEST.MF`` inside a
bundle ``.jar`` and turns them into a :class:`BundleInfo` for the dropins
directory.
"""

from __future__ import annotations

import zipfile
from pathlib import Path

from dropins_manager.core.bundle_info import DEFAULT_LOCATION_PREFIX, DEFAULT_START_LEVEL, BundleInfo
from dropins_manager.output import MessageType, VerbosityLevel, message

BUNDLE_EXTENSION = ".jar"
MANIFEST_NAME = "META-INF/MANIFEST.MF"

SYMBOLIC_NAME_HEADER = "Bundle-SymbolicName"
VERSION_HEADER = "Bundle-Version"
FRAGMENT_HOST_HEADER = "Fragment-Host"


class InvalidBundleError(Exception):
    """Raised when a bundle archive has no usable manifest."""


# ------------------------------------------------------------------
# Manifest parsing
# ------------------------------------------------------------------
def parse_main_attributes(text: str) -> dict[str, str]:
    """Parse the main section of a jar manifest.

    The main section ends at the first empty line. Lines starting with a
    single space continue the previous header's value.

    Args:
        text: Decoded manifest content

    Returns:
        Mapping of header name to value, in manifest order
    """
    attributes: dict[str, str] = {}
    current: str | None = None

    for line in text.splitlines():
        if not line:
            break
        if line.startswith(" "):
            if current is not None:
                attributes[current] += line[1:]
            continue
        name, sep, value = line.partition(":")
        if not sep:
            continue
        current = name.strip()
        attributes[current] = value.strip()

    return attributes


def strip_directives(symbolic_name: str) -> str:
    """Drop parameters such as ``;singleton:=true`` from a symbolic name."""
    return symbolic_name.split(";", 1)[0].strip()


def read_manifest(bundle_path: Path) -> dict[str, str]:
    """Read the main manifest attributes of a bundle archive.

    Args:
        bundle_path: Path to the ``.jar`` file

    Returns:
        Main attribute mapping

    Raises:
        InvalidBundleError: If the archive cannot be opened, has no
            manifest, or the manifest has no main attributes
    """
    try:
        with zipfile.ZipFile(bundle_path) as archive:
            try:
                raw = archive.read(MANIFEST_NAME)
            except KeyError as e:
                raise InvalidBundleError(f"Invalid bundle found in the dropins directory: {bundle_path}") from e
    except zipfile.BadZipFile as e:
        raise InvalidBundleError(f"Not a valid bundle archive: {bundle_path}") from e

    attributes = parse_main_attributes(raw.decode("utf-8", errors="replace"))
    if not attributes:
        raise InvalidBundleError(f"Invalid bundle found in the dropins directory: {bundle_path}")
    return attributes


# ------------------------------------------------------------------
# BundleInfo extraction
# ------------------------------------------------------------------
def read_bundle_info(
    bundle_path: Path,
    location_prefix: str = DEFAULT_LOCATION_PREFIX,
    start_level: int = DEFAULT_START_LEVEL,
) -> BundleInfo | None:
    """Build the BundleInfo for a file in the dropins directory.

    Files without the bundle extension are not bundles and yield ``None``.
    So does a readable bundle that lacks the identity headers; a warning is
    logged for it.

    Args:
        bundle_path: Path to the candidate file
        location_prefix: Registry-relative location of the dropins directory
        start_level: Start level given to the bundle

    Returns:
        BundleInfo, or None if the file is not applicable

    Raises:
        InvalidBundleError: If the archive has no usable manifest
        OSError: If the file cannot be read
    """
    if bundle_path.suffix != BUNDLE_EXTENSION:
        return None

    # Header names are case-insensitive
    attributes = {name.lower(): value for name, value in read_manifest(bundle_path).items()}

    symbolic_name = attributes.get(SYMBOLIC_NAME_HEADER.lower())
    version = attributes.get(VERSION_HEADER.lower())
    if symbolic_name:
        symbolic_name = strip_directives(symbolic_name)
    if not symbolic_name or not version:
        message(
            f"Required bundle manifest headers do not exist: {bundle_path}",
            MessageType.WARNING,
            VerbosityLevel.ALWAYS,
        )
        return None

    return BundleInfo(
        symbolic_name=symbolic_name,
        version=version,
        location=f"{location_prefix.rstrip('/')}/{bundle_path.name}",
        start_level=start_level,
        is_fragment=FRAGMENT_HOST_HEADER.lower() in attributes,
    )
