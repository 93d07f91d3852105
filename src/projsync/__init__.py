"""projsync - migrate GitHub project board metadata between repositories."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the current version of projsync."""
    return __version__
