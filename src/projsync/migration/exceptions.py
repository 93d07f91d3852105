"""Custom exceptions for repository migration."""

from projsync.exceptions import ProjSyncError


class MigrationError(ProjSyncError):
    """Base exception for repository migration errors."""


class MirrorError(MigrationError):
    """Error cloning or pushing a repository mirror."""
