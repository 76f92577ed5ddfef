"""Atomic replacement of ``bundles.info``.

The new registry is generated into a uniquely named directory under the
temporary workspace, staged next to the destination and moved over it with
a single ``os.replace``. A crash at any point leaves either the old or the
new registry, never a partial file.
"""

from __future__ import annotations

import os
import shutil
import uuid
from pathlib import Path

from dropins_manager.core.registry import RegistryIndex
from dropins_manager.output import MessageType, VerbosityLevel, message


class DeploymentError(Exception):
    """Raised when a reconciliation run cannot complete."""


def _create_workspace(temp_directory: Path) -> Path:
    if not temp_directory.is_dir():
        raise DeploymentError(f"Temporary directory does not exist: {temp_directory}. Cannot proceed.")

    workspace = temp_directory / f"bundles_info_{uuid.uuid4()}"
    try:
        workspace.mkdir()
    except OSError as e:
        raise DeploymentError(f"Failed to create the directory: {workspace}: {e}") from e
    return workspace


def write_registry(index: RegistryIndex, registry_file: Path, temp_directory: Path) -> bool:
    """Serialize *index* and replace *registry_file* with it.

    Only an existing registry is replaced; when *registry_file* is missing
    the generated file is discarded.

    Args:
        index: Final registry index
        registry_file: Destination ``bundles.info``
        temp_directory: Root of the temporary workspace

    Returns:
        True if the registry was replaced, False if it did not exist

    Raises:
        DeploymentError: If the workspace cannot be created or the replace fails
    """
    workspace = _create_workspace(temp_directory)
    try:
        generated = workspace / registry_file.name
        lines = index.to_lines()
        try:
            generated.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        except OSError as e:
            raise DeploymentError(f"Failed to write {generated}: {e}") from e

        if not registry_file.exists():
            message(
                f"Registry file does not exist, not updating: {registry_file}",
                MessageType.WARNING,
                VerbosityLevel.ALWAYS,
            )
            return False

        staged = registry_file.with_name(f".{registry_file.name}.{workspace.name}")
        try:
            shutil.copyfile(generated, staged)
            os.replace(staged, registry_file)
        except OSError as e:
            staged.unlink(missing_ok=True)
            raise DeploymentError(f"Failed to replace {registry_file}: {e}") from e

        message(
            f"Updated {registry_file} ({len(index)} bundle(s))",
            MessageType.DEBUG,
            VerbosityLevel.DEBUG,
        )
        return True
    finally:
        shutil.rmtree(workspace, ignore_errors=True)
