"""Deploys the bundles of the dropins directory into ``bundles.info``.

The deployer listens for server events. When the server is starting it
scans the dropins directory and, if anything changed since the previous
run, rewrites the registry:

    scan -> change check -> read and prune -> merge -> atomic write -> snapshot

Bundles are only registered here; installing and starting them is left to
the OSGi runtime reading ``bundles.info``.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from dropins_manager.core.bundle_info import DEFAULT_LOCATION_PREFIX, DEFAULT_START_LEVEL, BundleInfo
from dropins_manager.core.merge import MergeAction, merge_bundles
from dropins_manager.core.registry import REGISTRY_FILE, read_registry
from dropins_manager.core.scanner import scan_dropins
from dropins_manager.core.snapshot import SNAPSHOT_FILE, needs_reconciliation, write_snapshot
from dropins_manager.core.writer import write_registry
from dropins_manager.output import MessageType, VerbosityLevel, message


@dataclass(frozen=True)
class DeployerSettings:
    """Locations and defaults used by a deployment run.

    Attributes:
        dropins_directory: Directory scanned for bundles
        registry_directory: Directory holding ``bundles.info`` and ``previous.info``
        temp_directory: Root of the temporary workspace
        location_prefix: Location of the dropins directory relative to the registry directory
        start_level: Start level given to dropins bundles
        max_workers: Thread pool size for the scan
    """

    dropins_directory: Path
    registry_directory: Path
    temp_directory: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    location_prefix: str = DEFAULT_LOCATION_PREFIX
    start_level: int = DEFAULT_START_LEVEL
    max_workers: int | None = None

    @property
    def registry_file(self) -> Path:
        return self.registry_directory / REGISTRY_FILE

    @property
    def snapshot_file(self) -> Path:
        return self.registry_directory / SNAPSHOT_FILE


class ServerEvent:
    """Lifecycle event published by the host server."""

    STARTING = "starting"
    STOPPING = "stopping"

    def __init__(self, event_type: str):
        self.type = event_type

    def __repr__(self) -> str:
        return f"ServerEvent({self.type!r})"


@dataclass
class DeploymentResult:
    """Summary of a deployment run."""

    reconciled: bool
    bundles: list[BundleInfo] = field(default_factory=list)
    actions: list[MergeAction] = field(default_factory=list)
    registry_updated: bool = False

    @property
    def added(self) -> list[BundleInfo]:
        return [action.bundle for action in self.actions if action.is_added]


class DropinsDeployer:
    """Keeps ``bundles.info`` in line with the dropins directory."""

    def __init__(self, settings: DeployerSettings):
        self.settings = settings

    def notify(self, event: ServerEvent) -> DeploymentResult | None:
        """Handle a server event.

        Runs a deployment when the server is starting. Fatal errors are
        logged and the previous registry is left as it was.

        Args:
            event: The server event

        Returns:
            The DeploymentResult, or None if nothing ran or the run failed
        """
        if event.type != ServerEvent.STARTING:
            return None

        try:
            return self.deploy()
        except Exception as e:
            message(
                f"An error has occurred when updating the bundles.info using the OSGi bundle information: {e}",
                MessageType.ERROR,
                VerbosityLevel.ALWAYS,
            )
            return None

    def scan(self) -> list[BundleInfo]:
        """Scan the dropins directory, sorted by registry line."""
        bundles = scan_dropins(
            self.settings.dropins_directory,
            location_prefix=self.settings.location_prefix,
            start_level=self.settings.start_level,
            max_workers=self.settings.max_workers,
        )
        return sorted(bundles, key=BundleInfo.to_line)

    def deploy(self) -> DeploymentResult:
        """Reconcile ``bundles.info`` with the dropins directory.

        Returns:
            DeploymentResult describing the run

        Raises:
            OSError: If the dropins directory cannot be listed
            BundleInfoFormatError: If ``bundles.info`` is corrupt
            DeploymentError: If the registry cannot be replaced
        """
        settings = self.settings
        if not settings.dropins_directory.exists():
            message(
                f"Dropins directory does not exist: {settings.dropins_directory}",
                MessageType.DEBUG,
                VerbosityLevel.DEBUG,
            )
            return DeploymentResult(reconciled=False)

        bundles = self.scan()
        if not needs_reconciliation(bundles, settings.snapshot_file):
            message("Skipped the processing of bundles.info file", MessageType.INFO, VerbosityLevel.VERBOSE)
            return DeploymentResult(reconciled=False, bundles=bundles)

        index = read_registry(settings.registry_file, bundles, settings.location_prefix)
        actions = merge_bundles(index, bundles)
        updated = write_registry(index, settings.registry_file, settings.temp_directory)
        write_snapshot(settings.snapshot_file, bundles)

        return DeploymentResult(reconciled=True, bundles=bundles, actions=actions, registry_updated=updated)
