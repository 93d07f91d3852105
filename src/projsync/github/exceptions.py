"""Custom exceptions for the GitHub client."""

from __future__ import annotations

from projsync.exceptions import ProjSyncError

SECONDARY_RATE_LIMIT_MARKER = "secondary rate limit"


class GitHubError(ProjSyncError):
    """A GitHub API request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_secondary_rate_limit(self) -> bool:
        """True for a 403 whose message mentions the secondary rate limit."""
        return self.status_code == 403 and SECONDARY_RATE_LIMIT_MARKER in str(self).lower()
