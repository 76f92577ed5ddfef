"""Dropins directory scanner."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from dropins_manager.core.bundle_info import DEFAULT_LOCATION_PREFIX, DEFAULT_START_LEVEL, BundleInfo
from dropins_manager.core.manifest import read_bundle_info
from dropins_manager.output import MessageType, VerbosityLevel, message


def scan_dropins(
    directory: Path,
    location_prefix: str = DEFAULT_LOCATION_PREFIX,
    start_level: int = DEFAULT_START_LEVEL,
    max_workers: int | None = None,
) -> list[BundleInfo]:
    """Read the bundle information of every file in *directory*.

    Manifests are read in parallel, one task per direct child. A child that
    fails to load is logged and skipped. The order of the returned list is
    unspecified.

    Args:
        directory: Existing dropins directory
        location_prefix: Registry-relative location of *directory*
        start_level: Start level given to discovered bundles
        max_workers: Thread pool size (None for the executor default)

    Returns:
        BundleInfo for each valid bundle found

    Raises:
        OSError: If the directory cannot be listed
    """
    children = list(directory.iterdir())
    message(
        f"Scanning {len(children)} file(s) in {directory}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )

    bundles: list[BundleInfo] = []
    if not children:
        return bundles

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            pool.submit(read_bundle_info, child, location_prefix, start_level): child
            for child in children
        }
        for future in as_completed(futures):
            child = futures[future]
            try:
                bundle = future.result()
            except Exception as e:
                message(
                    f"Error when loading OSGi bundle info from {child}: {e}",
                    MessageType.WARNING,
                    VerbosityLevel.ALWAYS,
                )
                continue
            if bundle is not None:
                bundles.append(bundle)

    return bundles
