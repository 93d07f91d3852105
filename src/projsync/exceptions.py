"""Shared exceptions for projsync."""


class ProjSyncError(Exception):
    """Base exception for projsync errors."""


class ConfigurationError(ProjSyncError):
    """Configuration is missing or invalid (e.g. no GitHub token)."""


class ParseError(ProjSyncError):
    """Tabular input could not be parsed."""


class ValidationError(ProjSyncError):
    """A raw value cannot be converted for its target field."""


class NotFoundError(ProjSyncError):
    """A named remote entity does not exist."""


class ProjectNotFoundError(NotFoundError):
    """GitHub Project not found for the owner."""


class ItemNotFoundError(NotFoundError):
    """No project item carries the requested issue title."""


class IssueNotFoundError(NotFoundError):
    """Issue number does not exist in the repository."""


class AmbiguousTitleError(ProjSyncError):
    """More than one project item carries the same issue title."""
