"""Change detection for the dropins directory.

After every run that rewrites ``bundles.info``, the lines of the bundles
found in the dropins directory are stored in ``previous.info``. On the next
run the fresh scan is compared against that snapshot; if nothing changed
the registry is left alone.
"""

from __future__ import annotations

from pathlib import Path

from dropins_manager.core.bundle_info import BundleInfo, format_lines
from dropins_manager.output import MessageType, VerbosityLevel, message

SNAPSHOT_FILE = "previous.info"


def read_snapshot(snapshot_file: Path) -> list[str] | None:
    """Return the lines of the snapshot, or ``None`` if there is none."""
    if not snapshot_file.exists():
        return None
    return snapshot_file.read_text(encoding="utf-8").splitlines()


def write_snapshot(snapshot_file: Path, bundles: list[BundleInfo]) -> None:
    """Replace the snapshot with the lines of *bundles*."""
    lines = format_lines(bundles)
    snapshot_file.unlink(missing_ok=True)
    snapshot_file.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    message(
        f"Snapshot written to {snapshot_file} ({len(lines)} bundle(s))",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )


def has_changed(bundles: list[BundleInfo], previous: list[str] | None) -> bool:
    """Decide whether the dropins directory changed since the snapshot.

    Decision table:

    1. No snapshot -> changed
    2. Different number of bundles -> changed
    3. Every bundle line is present verbatim in the snapshot -> unchanged
    4. Otherwise -> changed

    Lines are compared as whole strings, so a version bump or a fragment
    flip counts as a change.

    Args:
        bundles: Bundles found by the current scan
        previous: Snapshot lines, or None if there is no snapshot

    Returns:
        True if the registry needs to be reconciled
    """
    if previous is None:
        return True
    if len(bundles) != len(previous):
        return True

    known = set(previous)
    return any(bundle.to_line() not in known for bundle in bundles)


def needs_reconciliation(bundles: list[BundleInfo], snapshot_file: Path) -> bool:
    """Compare *bundles* with the snapshot stored at *snapshot_file*.

    The snapshot itself is not modified; callers replace it with
    :func:`write_snapshot` once the registry has been updated.
    """
    changed = has_changed(bundles, read_snapshot(snapshot_file))
    if not changed:
        message(
            f"No changes in the dropins directory since {snapshot_file}",
            MessageType.DEBUG,
            VerbosityLevel.DEBUG,
        )
    return changed
