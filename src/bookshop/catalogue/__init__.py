"""Catalogue access factory.

Provides get_catalogue() / set_catalogue() to swap implementations:
- RepositoryCatalogue reads the domain's own Item aggregates (default)
- any other Catalogue adapter, e.g. a stub in tests
"""

from bookshop.catalogue.port import Catalogue
from bookshop.catalogue.repository_adapter import RepositoryCatalogue

_current_catalogue: Catalogue | None = None


def get_catalogue() -> Catalogue:
    """Return the active catalogue. Defaults to RepositoryCatalogue."""
    global _current_catalogue
    if _current_catalogue is None:
        _current_catalogue = RepositoryCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: Catalogue) -> None:
    """Override the active catalogue (useful for tests)."""
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    """Reset to the default catalogue."""
    global _current_catalogue
    _current_catalogue = None
