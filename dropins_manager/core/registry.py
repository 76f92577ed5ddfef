"""Reading ``bundles.info`` into a registry index.

Entries are grouped by symbolic name. Entries whose location points into
the dropins directory are dropped when the bundle is no longer there.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from dropins_manager.core.bundle_info import DEFAULT_LOCATION_PREFIX, BundleInfo, is_comment
from dropins_manager.output import MessageType, VerbosityLevel, message

REGISTRY_FILE = "bundles.info"


class RegistryIndex:
    """Bundles of a registry, grouped by symbolic name.

    Versions of one bundle keep their insertion order. Symbolic names are
    always iterated in sorted order so the serialized registry is stable.
    """

    def __init__(self, header: list[str] | None = None):
        self.header: list[str] = list(header or [])
        self._entries: dict[str, list[BundleInfo]] = {}

    def add(self, bundle: BundleInfo) -> None:
        """Append *bundle* to the versions of its symbolic name."""
        self._entries.setdefault(bundle.symbolic_name, []).append(bundle)

    def get(self, symbolic_name: str) -> list[BundleInfo] | None:
        return self._entries.get(symbolic_name)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, symbolic_name: object) -> bool:
        return symbolic_name in self._entries

    def __iter__(self) -> Iterator[BundleInfo]:
        for name in self.names():
            yield from self._entries[name]

    def __len__(self) -> int:
        return sum(len(versions) for versions in self._entries.values())

    def to_lines(self) -> list[str]:
        """Return the registry file lines: header comments, then entries."""
        return self.header + [bundle.to_line() for bundle in self]


def read_registry(
    registry_file: Path,
    dropins_bundles: list[BundleInfo],
    location_prefix: str = DEFAULT_LOCATION_PREFIX,
) -> RegistryIndex:
    """Read *registry_file*, removing stale dropins entries.

    A dropins entry is kept only if a bundle with the same symbolic name,
    version and fragment-ness was found in the dropins directory. Other
    entries are always kept. Comment lines before the first entry are
    preserved as the header; later comment lines are dropped.

    Args:
        registry_file: Path to ``bundles.info`` (a missing file reads as empty)
        dropins_bundles: Bundles found by the current scan
        location_prefix: Registry-relative location of the dropins directory

    Returns:
        RegistryIndex of the surviving entries

    Raises:
        BundleInfoFormatError: If a line is malformed
        OSError: If the file exists but cannot be read
    """
    index = RegistryIndex()
    if not registry_file.exists():
        return index

    in_header = True
    for line in registry_file.read_text(encoding="utf-8").splitlines():
        if is_comment(line):
            if in_header:
                index.header.append(line)
            continue
        if not line.strip():
            continue
        in_header = False

        entry = BundleInfo.from_line(line)
        if entry.is_from_dropins(location_prefix) and not any(entry.matches(b) for b in dropins_bundles):
            message(
                f"Removing stale dropins bundle: {entry.display_name}",
                MessageType.INFO,
                VerbosityLevel.VERBOSE,
            )
            continue
        index.add(entry)

    return index
