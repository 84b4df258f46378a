import logging
from typing import Any
from urllib.parse import quote

import httpx

from .commits import Commit
from .errors import ConfigError, UnresolvableRange

logger = logging.getLogger("nextversion")

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100


class GitHubError(Exception):
    """Raised when the GitHub API answers with an unexpected error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class GitHubClient:
    """Minimal async GitHub REST client for one repository."""

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10,
    ):
        owner, sep, name = repository.partition("/")
        if not sep or not owner or not name:
            raise ConfigError(f"Repository must be in 'owner/name' form, got: {repository!r}")
        self.owner = owner
        self.name = name
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    async def _get(self, path: str, **params: Any) -> httpx.Response:
        resp = await self._client.get(self._repo_path + path, params=params or None)
        if resp.status_code >= 400 and resp.status_code != 404:
            raise GitHubError(
                f"GitHub API request GET {resp.request.url.path} failed with {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise GitHubError(
                f"GitHub API request GET {resp.request.url.path} returned a non-JSON body",
                status_code=resp.status_code,
            ) from e
        if not isinstance(data, dict):
            raise GitHubError(
                f"GitHub API request GET {resp.request.url.path} returned an unexpected body",
                status_code=resp.status_code,
            )
        return data

    @staticmethod
    def _field(resp: httpx.Response, data: dict[str, Any], key: str) -> Any:
        if key not in data:
            raise GitHubError(
                f"GitHub API request GET {resp.request.url.path} is missing '{key}'",
                status_code=resp.status_code,
            )
        return data[key]

    async def get_latest_release_tag(self) -> str | None:
        """Tag name of the latest release, or None if the repository has no releases."""
        resp = await self._get("/releases/latest")
        if resp.status_code == 404:
            return None
        return self._field(resp, self._json(resp), "tag_name")

    async def get_commits_between(self, range_start: str, range_end: str) -> list[Commit]:
        """All commits in ``range_start...range_end``, exhausting compare pagination.

        A 404 on the first page means the range cannot be resolved; on a later
        page it means we ran past the last one.
        """
        logger.debug("Getting list of commits between %s and %s", range_start, range_end)
        # refs may contain '#', '%' or '?'
        basehead = quote(f"{range_start}...{range_end}", safe="/")
        commits: list[Commit] = []
        page = 1
        while True:
            logger.debug("Fetching commits page %d", page)
            resp = await self._get(f"/compare/{basehead}", page=page, per_page=PER_PAGE)
            if resp.status_code == 404:
                if page == 1:
                    raise UnresolvableRange(range_start, range_end)
                break

            data = self._json(resp)
            total_commits = data.get("total_commits", 0)
            page_commits = data.get("commits") or []
            logger.debug("Fetched %d commits, total to fetch: %d", len(page_commits), total_commits)
            try:
                for item in page_commits:
                    commits.append(Commit(sha=item["sha"], message=item["commit"]["message"]))
            except (KeyError, TypeError) as e:
                raise GitHubError(
                    f"GitHub API request GET {resp.request.url.path} returned a malformed commit",
                    status_code=resp.status_code,
                ) from e

            if not page_commits or len(commits) >= total_commits:
                break
            page += 1

        logger.debug("Total commits fetched: %d", len(commits))
        return commits

    async def get_default_branch_ref(self) -> str:
        resp = await self._get("")
        if resp.status_code == 404:
            raise GitHubError(f"Repository {self.owner}/{self.name} not found", status_code=404)
        return f"refs/heads/{self._field(resp, self._json(resp), 'default_branch')}"
