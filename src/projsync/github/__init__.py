"""GitHub client - GraphQL and REST transport with cursor pagination."""

from projsync.github.client import GitHubClient, describe_error
from projsync.github.exceptions import GitHubError
from projsync.github.models import Label, Milestone
from projsync.github.pagination import Page, paginate

__all__ = [
    "GitHubClient",
    "GitHubError",
    "Label",
    "Milestone",
    "Page",
    "describe_error",
    "paginate",
]
