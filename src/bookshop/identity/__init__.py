"""Customer directory factory.

Provides get_directory() / set_directory() to swap implementations.
"""

from bookshop.identity.port import CustomerDirectory
from bookshop.identity.repository_adapter import RepositoryCustomerDirectory

_current_directory: CustomerDirectory | None = None


def get_directory() -> CustomerDirectory:
    """Return the active customer directory. Defaults to the repository-backed one."""
    global _current_directory
    if _current_directory is None:
        _current_directory = RepositoryCustomerDirectory()
    return _current_directory


def set_directory(directory: CustomerDirectory) -> None:
    """Override the active customer directory (useful for tests)."""
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    """Reset to the default customer directory."""
    global _current_directory
    _current_directory = None
