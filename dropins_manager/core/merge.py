"""Merging dropins bundles into the registry index.

Symbolic name, version and fragment-ness identify a bundle. The location
only decides between "already registered" and "conflict"; an existing
entry is never overwritten.
"""

from __future__ import annotations

from dropins_manager.core.bundle_info import BundleInfo
from dropins_manager.core.registry import RegistryIndex
from dropins_manager.output import MessageType, VerbosityLevel, message


class MergeAction:
    """Outcome of merging a single dropins bundle."""

    ADDED = "added"
    ADDED_VERSION = "added_version"
    PRESENT = "present"
    CONFLICT = "conflict"
    FRAGMENT_CONFLICT = "fragment_conflict"

    def __init__(
        self,
        action: str,
        bundle: BundleInfo,
        existing: BundleInfo | None = None,
    ):
        self.action = action
        self.bundle = bundle
        self.existing = existing

    @property
    def is_added(self) -> bool:
        return self.action in (self.ADDED, self.ADDED_VERSION)

    def __repr__(self) -> str:
        return f"MergeAction({self.action!r}, {self.bundle.to_line()!r})"


def _warn_ignored(bundle: BundleInfo, existing: BundleInfo) -> None:
    message(
        f"Ignoring the deployment of bundle: {bundle}, because it is already "
        f"available in the system: {existing.location}. "
        f"Bundle-SymbolicName and Bundle-Version headers are identical.",
        MessageType.WARNING,
        VerbosityLevel.ALWAYS,
    )


def merge_bundle(index: RegistryIndex, bundle: BundleInfo) -> MergeAction:
    """Merge one dropins bundle into *index*.

    Decision tree:

    1. Symbolic name unknown -> add as a new bundle
    2. Same version registered:
       a. fragment-ness differs -> warn and ignore, whatever the location
       b. same location -> already registered
       c. different location -> warn and ignore, first registered wins
    3. No registered version matches -> add as another version

    Args:
        index: Registry index (modified in place)
        bundle: Bundle found in the dropins directory

    Returns:
        MergeAction describing what happened
    """
    versions = index.get(bundle.symbolic_name)

    if versions is None:
        index.add(bundle)
        message(f"Deploying bundle: {bundle.display_name}", MessageType.INFO, VerbosityLevel.VERBOSE)
        return MergeAction(MergeAction.ADDED, bundle)

    for existing in versions:
        if existing.version != bundle.version:
            continue

        if existing.is_fragment != bundle.is_fragment:
            _warn_ignored(bundle, existing)
            return MergeAction(MergeAction.FRAGMENT_CONFLICT, bundle, existing)

        if existing.location == bundle.location:
            message(f"Bundle already deployed: {bundle.location}", MessageType.DEBUG, VerbosityLevel.DEBUG)
            return MergeAction(MergeAction.PRESENT, bundle, existing)

        _warn_ignored(bundle, existing)
        return MergeAction(MergeAction.CONFLICT, bundle, existing)

    index.add(bundle)
    message(f"Deploying bundle: {bundle.display_name}", MessageType.INFO, VerbosityLevel.VERBOSE)
    return MergeAction(MergeAction.ADDED_VERSION, bundle)


def merge_bundles(index: RegistryIndex, bundles: list[BundleInfo]) -> list[MergeAction]:
    """Merge every bundle in *bundles* into *index*, in order."""
    return [merge_bundle(index, bundle) for bundle in bundles]
