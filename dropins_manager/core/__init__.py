"""Core reconciliation of the dropins directory with bundles.info."""

from .bundle_info import (
    DEFAULT_LOCATION_PREFIX,
    DEFAULT_START_LEVEL,
    BundleInfo,
    BundleInfoFormatError,
)
from .deployer import DeployerSettings, DeploymentResult, DropinsDeployer, ServerEvent
from .manifest import InvalidBundleError, read_bundle_info, read_manifest
from .merge import MergeAction, merge_bundle, merge_bundles
from .registry import RegistryIndex, read_registry
from .scanner import scan_dropins
from .snapshot import has_changed, needs_reconciliation, read_snapshot, write_snapshot
from .writer import DeploymentError, write_registry

__all__ = [
    "DEFAULT_LOCATION_PREFIX",
    "DEFAULT_START_LEVEL",
    "BundleInfo",
    "BundleInfoFormatError",
    "DeployerSettings",
    "DeploymentError",
    "DeploymentResult",
    "DropinsDeployer",
    "InvalidBundleError",
    "MergeAction",
    "RegistryIndex",
    "ServerEvent",
    "has_changed",
    "merge_bundle",
    "merge_bundles",
    "needs_reconciliation",
    "read_bundle_info",
    "read_manifest",
    "read_registry",
    "read_snapshot",
    "scan_dropins",
    "write_registry",
    "write_snapshot",
]
