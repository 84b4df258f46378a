import os

from pydantic import BaseModel, ValidationError, field_validator

from .errors import ConfigError
from .logic import MalformedCommitPolicy


def action_input(name: str, default: str = "") -> str:
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>, hyphens kept
    return os.getenv(f"INPUT_{name.replace(' ', '_').upper()}", default).strip()


class ActionInputs(BaseModel):
    github_token: str
    target_branch: str
    not_conventional_commits_reaction: MalformedCommitPolicy = MalformedCommitPolicy.WARN
    init_release_version: str = "v0.1.0"
    pre_release_version_glue: str = "-"

    # context provided by the runner
    repository: str
    sha: str = ""
    api_url: str = "https://api.github.com"
    output_path: str | None = None  # GITHUB_OUTPUT

    @field_validator("github_token", "target_branch", "init_release_version", "pre_release_version_glue")
    @classmethod
    def _non_empty(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"Input '{info.field_name.replace('_', '-')}' cannot be an empty string")
        return v.strip()

    @field_validator("repository")
    @classmethod
    def _repository(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("GITHUB_REPOSITORY is not set; expected 'owner/name'")
        return v.strip()

    @field_validator("not_conventional_commits_reaction", mode="before")
    @classmethod
    def _policy(cls, v):
        if isinstance(v, str):
            return MalformedCommitPolicy.from_string(v)
        return v


class Settings(BaseModel):
    # github
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"
    webhook_secret: str | None = None  # NEXTVERSION_WEBHOOK_SECRET

    # resolution defaults for webhook runs
    not_conventional_commits_reaction: MalformedCommitPolicy = MalformedCommitPolicy.WARN
    init_release_version: str = "v0.1.0"
    pre_release_version_glue: str = "-"

    max_body_bytes: int = 2_000_000  # 2MB

    # structured logging toggle
    structured_logging: bool = True  # NEXTVERSION_STRUCT_LOG ("0" to disable)

    @field_validator("not_conventional_commits_reaction", mode="before")
    @classmethod
    def _policy(cls, v):
        if isinstance(v, str):
            return MalformedCommitPolicy.from_string(v)
        return v


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    msg = err.get("msg", str(e))
    # pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")


def load_action_inputs() -> ActionInputs:
    try:
        return ActionInputs(
            github_token=action_input("github-token"),
            target_branch=action_input("target-branch"),
            not_conventional_commits_reaction=action_input("not-conventional-commits-reaction", "warn"),
            init_release_version=action_input("init-release-version", "v0.1.0"),
            pre_release_version_glue=action_input("pre-release-version-glue", "-"),
            repository=os.getenv("GITHUB_REPOSITORY", ""),
            sha=os.getenv("GITHUB_SHA", ""),
            api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            output_path=os.getenv("GITHUB_OUTPUT") or None,
        )
    except ValidationError as e:
        raise ConfigError(_first_error(e)) from e


def load_settings() -> Settings:
    try:
        return Settings(
            github_token=os.getenv("GITHUB_TOKEN"),
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            webhook_secret=os.getenv("NEXTVERSION_WEBHOOK_SECRET"),
            not_conventional_commits_reaction=os.getenv("NEXTVERSION_NOT_CONVENTIONAL_REACTION", "warn"),
            init_release_version=os.getenv("NEXTVERSION_INIT_RELEASE_VERSION", "v0.1.0"),
            pre_release_version_glue=os.getenv("NEXTVERSION_PRE_RELEASE_GLUE", "-"),
            max_body_bytes=os.getenv("NEXTVERSION_MAX_BODY_BYTES", "2000000"),
            structured_logging=os.getenv("NEXTVERSION_STRUCT_LOG", "1") != "0",
        )
    except ValidationError as e:
        raise ConfigError(_first_error(e)) from e
