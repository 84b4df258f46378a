"""Resolve the next version of a repository from its release and commit history."""
import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict

from . import versioning
from .commits import Commit
from .errors import InvalidVersionFormat, MalformedCommitMessage, UnresolvableRange
from .github_client import GitHubError
from .logic import MalformedCommitPolicy, classify, short_sha, suffix_with_prerelease
from .versioning import BumpType

logger = logging.getLogger("nextversion")


class RepositoryClient(Protocol):
    async def get_latest_release_tag(self) -> str | None: ...

    async def get_commits_between(self, range_start: str, range_end: str) -> list[Commit]: ...

    async def get_default_branch_ref(self) -> str: ...


def _hyphenate(name: str) -> str:
    return name.replace("_", "-")


class VersionOutputs(BaseModel):
    model_config = ConfigDict(alias_generator=_hyphenate, populate_by_name=True)

    latest_release_tag: str = ""
    current_version: str = ""
    new_version: str
    new_major_version: str

    def as_outputs(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


async def resolve_next_version(
    client: RepositoryClient,
    target_branch: str,
    policy: MalformedCommitPolicy = MalformedCommitPolicy.WARN,
    init_release_version: str = "v0.1.0",
    pre_release_glue: str = "-",
    sha: str = "",
) -> VersionOutputs:
    latest_release_tag = await client.get_latest_release_tag()
    logger.info("Latest release tag: %s", latest_release_tag or "")

    current_version = ""
    if latest_release_tag:
        current_version = versioning.valid(latest_release_tag)
        if not current_version:
            raise InvalidVersionFormat(
                latest_release_tag,
                f"Latest release tag ({latest_release_tag}) is not a valid semver version. "
                "Please ensure your latest release tag follows semver format.",
            )

        logger.debug("Getting list of commits between %s and %s.", latest_release_tag, target_branch)
        try:
            commits = await client.get_commits_between(latest_release_tag, target_branch)
        except (GitHubError, httpx.HTTPError) as e:
            raise UnresolvableRange(latest_release_tag, target_branch) from e

        bump: BumpType | None = None
        if not commits:
            logger.info("No new commits found since the latest release.")
        else:
            logger.info("Found %d commits since the latest release.", len(commits))
            result = classify(commits, policy)
            if result.aborted:
                raise MalformedCommitMessage(result.aborted_on)
            bump = result.bump

        if bump is None:
            logger.info("No conventional commits found. Bumping patch version.")
            bump = BumpType.PATCH
        logger.info("Bump type: %s", bump)

        new_version = versioning.increment(current_version, bump)
    else:
        new_version = versioning.valid(init_release_version)
        if not new_version:
            raise InvalidVersionFormat(
                init_release_version,
                f"No valid latest release tag found and the provided initial version "
                f"({init_release_version}) is not a valid semver version.",
            )

    # major is taken before any pre-release suffix
    new_major_version = versioning.major(new_version)

    default_branch_ref = await client.get_default_branch_ref()
    if target_branch != default_branch_ref:
        logger.info(
            "Target ref (%s) is not the default branch ref (%s). "
            "Suffixing version with pre-release identifier.",
            target_branch,
            default_branch_ref,
        )
        new_version = suffix_with_prerelease(new_version, pre_release_glue, short_sha(sha))

    logger.info("Current version: %s", current_version)
    logger.info("New version: %s", new_version)
    logger.info("New major version: %d", new_major_version)
    return VersionOutputs(
        latest_release_tag=latest_release_tag or "",
        current_version=current_version,
        new_version=new_version,
        new_major_version=str(new_major_version),
    )
