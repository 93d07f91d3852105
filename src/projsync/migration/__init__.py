"""Repository migration - git mirror, metadata copy and issue cleanup."""

from projsync.migration.cleaner import IssueCleaner, strip_attribution
from projsync.migration.copier import MetadataCopier, protection_to_input
from projsync.migration.exceptions import MigrationError, MirrorError
from projsync.migration.mirror import RepositoryMirror

__all__ = [
    "IssueCleaner",
    "MetadataCopier",
    "MigrationError",
    "MirrorError",
    "RepositoryMirror",
    "protection_to_input",
    "strip_attribution",
]
