"""Conventional-commit parsing.

Only the parts of a message that matter for version decisions are kept:
the header type and scope, the breaking-change marker and the footer notes.
A ``!`` in the header is normalized into a ``BREAKING CHANGE`` note so that
callers only ever need to inspect notes.
"""
import re
from dataclasses import dataclass, field

BREAKING_CHANGE = "BREAKING CHANGE"

# type(scope)!: description
HEADER_PATTERN = re.compile(
    r"^(?P<type>[^\s():!]+)(?:\((?P<scope>[^()\r\n]+)\))?(?P<bang>!)?:[ \t]*(?P<description>\S.*)$"
)

# "Token: value" or "Token #value"; BREAKING CHANGE is the only token allowed a space
FOOTER_PATTERN = re.compile(
    r"^(?P<token>BREAKING CHANGE|BREAKING-CHANGE|[\w-]+)(?::[ \t]+|[ \t]+#)(?P<value>.*)$"
)


@dataclass(frozen=True)
class Commit:
    sha: str
    message: str


@dataclass(frozen=True)
class ParsedCommitNote:
    title: str
    text: str


@dataclass
class ParsedCommit:
    type: str
    description: str
    scope: str | None = None
    breaking: bool = False
    body: str = ""
    notes: list[ParsedCommitNote] = field(default_factory=list)


class NotConventionalCommit(ValueError):
    """Raised when a message does not follow the conventional-commits grammar."""


def _footer_start(lines: list[str]) -> int:
    # footers begin at the first token line that follows a blank line
    for i in range(2, len(lines)):
        if not lines[i - 1].strip() and FOOTER_PATTERN.match(lines[i]):
            return i
    return len(lines)


def _parse_footers(lines: list[str]) -> list[ParsedCommitNote]:
    notes: list[tuple[str, list[str]]] = []
    for line in lines:
        m = FOOTER_PATTERN.match(line)
        if m:
            token = m.group("token")
            if token == "BREAKING-CHANGE":
                token = BREAKING_CHANGE
            notes.append((token, [m.group("value")]))
        elif notes:
            # continuation of a multi-line footer value
            notes[-1][1].append(line)
    return [ParsedCommitNote(title=t, text="\n".join(v).strip()) for t, v in notes]


def parse_conventional_commit(message: str) -> ParsedCommit:
    lines = message.replace("\r\n", "\n").rstrip("\n").split("\n")
    header = lines[0]
    m = HEADER_PATTERN.match(header)
    if not m:
        raise NotConventionalCommit(f"not a conventional commit header: {header!r}")

    start = _footer_start(lines)
    body = "\n".join(lines[1:start]).strip()
    notes = _parse_footers(lines[start:])

    bang = m.group("bang") == "!"
    description = m.group("description").strip()
    if bang and not any(n.title == BREAKING_CHANGE for n in notes):
        notes.append(ParsedCommitNote(title=BREAKING_CHANGE, text=description))

    return ParsedCommit(
        type=m.group("type"),
        description=description,
        scope=m.group("scope"),
        breaking=bang or any(n.title == BREAKING_CHANGE for n in notes),
        body=body,
        notes=notes,
    )
