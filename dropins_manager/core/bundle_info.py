"""Bundle information lines as stored in ``bundles.info``.

A line has five comma separated fields::

    symbolic-name,version,location,start-level,marked-as-started

``marked-as-started`` is ``false`` for fragments, since a fragment is
attached to its host and never started on its own.
"""

from __future__ import annotations

from dataclasses import dataclass

# Start level assigned to bundles discovered in the dropins directory
DEFAULT_START_LEVEL = 4

# Location prefix of dropins bundles, relative to the registry directory
DEFAULT_LOCATION_PREFIX = "../../dropins"

COMMENT_MARKER = "#"

_FIELD_COUNT = 5


class BundleInfoFormatError(Exception):
    """Raised when a ``bundles.info`` line cannot be parsed."""


@dataclass(frozen=True)
class BundleInfo:
    """Identity and location of one OSGi bundle.

    Attributes:
        symbolic_name: Bundle-SymbolicName without directives
        version: Bundle-Version
        location: Path of the bundle file, relative to the registry directory
        start_level: OSGi start level
        is_fragment: True when the bundle declares a Fragment-Host
    """

    symbolic_name: str
    version: str
    location: str
    start_level: int = DEFAULT_START_LEVEL
    is_fragment: bool = False

    @classmethod
    def from_line(cls, line: str) -> BundleInfo:
        """Parse a single registry line.

        Args:
            line: A non-comment line from ``bundles.info`` or ``previous.info``

        Returns:
            The parsed BundleInfo

        Raises:
            BundleInfoFormatError: If the line does not have five fields, the
                start level is not an integer or the started flag is not a boolean
        """
        parts = [part.strip() for part in line.split(",")]
        if len(parts) != _FIELD_COUNT:
            raise BundleInfoFormatError(f"Invalid line in the bundles.info file: {line}")

        name, version, location, start_level, started = parts
        if not name or not version:
            raise BundleInfoFormatError(f"Missing symbolic name or version: {line}")

        try:
            level = int(start_level)
        except ValueError as e:
            raise BundleInfoFormatError(f"Invalid start level '{start_level}': {line}") from e

        started = started.lower()
        if started not in ("true", "false"):
            raise BundleInfoFormatError(f"Invalid started flag '{parts[4]}': {line}")

        return cls(name, version, location, level, started == "false")

    def to_line(self) -> str:
        """Return the canonical registry line for this bundle."""
        started = "false" if self.is_fragment else "true"
        return f"{self.symbolic_name},{self.version},{self.location},{self.start_level},{started}"

    def is_from_dropins(self, location_prefix: str = DEFAULT_LOCATION_PREFIX) -> bool:
        """Return ``True`` if the bundle location points into the dropins directory."""
        return self.location.startswith(location_prefix.rstrip("/") + "/")

    def matches(self, other: BundleInfo) -> bool:
        """Return ``True`` if *other* has the same name, version and fragment-ness."""
        return (
            self.symbolic_name == other.symbolic_name
            and self.version == other.version
            and self.is_fragment == other.is_fragment
        )

    @property
    def display_name(self) -> str:
        return f"{self.symbolic_name}_{self.version}.jar"

    def __str__(self) -> str:
        return self.to_line()


def format_lines(bundles: list[BundleInfo]) -> list[str]:
    """Return the registry lines for *bundles*, preserving order."""
    return [bundle.to_line() for bundle in bundles]


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_MARKER)
