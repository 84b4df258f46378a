from enum import IntEnum

import semver

from .errors import IncrementFailure


class BumpType(IntEnum):
    """Severity by which a version advances, ordered PATCH < MINOR < MAJOR."""

    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def part(self) -> str:
        return self.name.lower()

    def __str__(self) -> str:
        return self.part


def parse(value: str | None) -> semver.Version | None:
    """Parse a version string, accepting a single leading ``v``.

    Returns None for anything that is not a valid semver version.
    """
    if not value:
        return None
    cleaned = value.strip()
    if cleaned.startswith("v"):
        cleaned = cleaned[1:]
    try:
        return semver.Version.parse(cleaned)
    except (ValueError, TypeError):
        return None


def valid(value: str | None) -> str | None:
    """Normalized version string (no leading ``v``, no build metadata) or None."""
    version = parse(value)
    if version is None:
        return None
    return str(version.replace(build=None))


def increment(version: str, bump: BumpType) -> str:
    current = parse(version)
    if current is None:
        raise IncrementFailure(version, bump.part)
    try:
        return str(current.next_version(part=bump.part))
    except ValueError as e:
        raise IncrementFailure(version, bump.part) from e


def major(version: str) -> int:
    parsed = parse(version)
    if parsed is None:
        raise ValueError(f"{version} is not a valid semver version")
    return parsed.major
