class VersionResolveError(Exception):
    """Fatal condition for a version resolution run."""


class InvalidVersionFormat(VersionResolveError):
    def __init__(self, value: str, message: str | None = None):
        self.value = value
        super().__init__(message or f"{value} is not a valid semver version.")


class UnresolvableRange(VersionResolveError):
    def __init__(self, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__(
            f"Failed to get the list of commits between {start} and {end}. "
            "Please ensure the target branch exists."
        )


class MalformedCommitMessage(VersionResolveError):
    def __init__(self, commit_message: str):
        self.commit_message = commit_message
        super().__init__(f"Commit message not in conventional-commits format: '{commit_message}'")


class IncrementFailure(VersionResolveError):
    def __init__(self, version: str, bump: str):
        self.version = version
        self.bump = bump
        super().__init__(f"Failed to increment version {version} with bump type {bump}.")


class ConfigError(ValueError):
    """Raised when an input or setting cannot be used."""
