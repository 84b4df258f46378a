#!/usr/bin/env python
"""Print the next semantic version of a GitHub repository.

Usage: determine_next_version.py <owner/repo> <target-ref> [sha]

Uses GITHUB_TOKEN for API access. The version is derived from the conventional
commits between the latest release and <target-ref>; refs other than the
default branch get a pre-release suffix built from [sha].
"""
from __future__ import annotations
import asyncio, os, sys

import httpx

from nextversion.errors import ConfigError, VersionResolveError
from nextversion.github_client import GitHubClient, GitHubError
from nextversion.logic import MalformedCommitPolicy
from nextversion.resolver import resolve_next_version

USAGE = __doc__.strip().splitlines()[2]


async def determine(token: str, repository: str, target: str, sha: str) -> str:
    async with GitHubClient(token, repository) as client:
        outputs = await resolve_next_version(client, target, MalformedCommitPolicy.IGNORE, sha=sha)
    return outputs.new_version


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) not in (2, 3):
        print(USAGE, file=sys.stderr)
        return 1
    token = os.getenv('GITHUB_TOKEN')
    if not token:
        print('GITHUB_TOKEN is not set', file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1
    repository, target = args[0], args[1]
    sha = args[2] if len(args) == 3 else ''
    try:
        print(asyncio.run(determine(token, repository, target, sha)))
    except (VersionResolveError, ConfigError, GitHubError, httpx.HTTPError) as e:
        print(e, file=sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
