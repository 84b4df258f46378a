"""Bump classification and pre-release suffixing."""
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .commits import BREAKING_CHANGE, Commit, NotConventionalCommit, ParsedCommitNote, parse_conventional_commit
from .versioning import BumpType

logger = logging.getLogger("nextversion")

IGNORE_MESSAGE_PATTERN = re.compile(r"^Merge ")
MINOR_TYPES = {"feat", "feature"}
SHORT_SHA_LENGTH = 7


class MalformedCommitPolicy(str, Enum):
    FAIL = "error"
    WARN = "warn"
    IGNORE = "ignore"

    @classmethod
    def from_string(cls, value: str) -> "MalformedCommitPolicy":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid not-conventional-commits-reaction value: {value}") from None


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a commit range.

    Exactly one of ``bump`` and ``aborted_on`` is set. ``aborted_on`` holds the
    offending message when the FAIL policy stopped classification.
    """

    bump: BumpType | None = None
    aborted_on: str | None = None

    @property
    def aborted(self) -> bool:
        return self.aborted_on is not None


def note_has_breaking_change(note: ParsedCommitNote) -> bool:
    return note.title == BREAKING_CHANGE


def classify(
    commits: Iterable[Commit], policy: MalformedCommitPolicy = MalformedCommitPolicy.WARN
) -> Classification:
    triggers_major = False
    triggers_minor = False

    for commit in commits:
        if IGNORE_MESSAGE_PATTERN.match(commit.message):
            logger.debug("Ignoring commit message: '%s'", commit.message)
            continue

        try:
            parsed = parse_conventional_commit(commit.message)
        except NotConventionalCommit:
            if policy is MalformedCommitPolicy.FAIL:
                return Classification(aborted_on=commit.message)
            if policy is MalformedCommitPolicy.WARN:
                logger.warning("Commit message not in conventional-commits format: '%s'", commit.message)
            continue

        if any(note_has_breaking_change(n) for n in parsed.notes):
            triggers_major = True
        elif parsed.type.lower() in MINOR_TYPES:
            triggers_minor = True

    if triggers_major:
        return Classification(bump=BumpType.MAJOR)
    if triggers_minor:
        return Classification(bump=BumpType.MINOR)
    return Classification(bump=BumpType.PATCH)


def short_sha(sha: str) -> str:
    return sha[:SHORT_SHA_LENGTH]


def suffix_with_prerelease(version: str, glue: str, short_hash: str) -> str:
    """Append ``short_hash`` to ``version`` joined by ``glue``; glue is not validated."""
    return f"{version}{glue}{short_hash}"
