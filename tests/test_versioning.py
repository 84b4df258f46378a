import pytest

from nextversion import versioning
from nextversion.errors import IncrementFailure
from nextversion.versioning import BumpType


def test_bump_type_ordering():
    assert BumpType.PATCH < BumpType.MINOR < BumpType.MAJOR
    assert max([BumpType.MINOR, BumpType.MAJOR, BumpType.PATCH]) is BumpType.MAJOR
    assert str(BumpType.MINOR) == "minor"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("v1.2.3", "1.2.3"),
        ("1.2.3", "1.2.3"),
        (" v0.1.0 ", "0.1.0"),
        ("1.0.0-rc.1", "1.0.0-rc.1"),
        ("1.0.0+build.5", "1.0.0"),
        ("invalid-tag", None),
        ("=1.2.3", None),
        ("1.2", None),
        ("", None),
        (None, None),
    ],
)
def test_valid(value, expected):
    assert versioning.valid(value) == expected


@pytest.mark.parametrize(
    "version,bump,expected",
    [
        ("1.2.3", BumpType.PATCH, "1.2.4"),
        ("1.2.3", BumpType.MINOR, "1.3.0"),
        ("1.2.3", BumpType.MAJOR, "2.0.0"),
        ("2.5.10", BumpType.PATCH, "2.5.11"),
        ("1.2.3-rc.1", BumpType.PATCH, "1.2.3"),
    ],
)
def test_increment(version, bump, expected):
    assert versioning.increment(version, bump) == expected


def test_increment_invalid_version():
    with pytest.raises(IncrementFailure, match="Failed to increment version nope with bump type patch"):
        versioning.increment("nope", BumpType.PATCH)


def test_major():
    assert versioning.major("3.1.4") == 3
    assert versioning.major("v2.0.0") == 2
