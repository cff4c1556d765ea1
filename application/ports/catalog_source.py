"""
Catalog Source Interface (Port).

This module defines the abstract interface for fetching the exercise catalog.
Implementations may use Supabase or other backends.
"""
from typing import Any, Dict, List, Protocol


class CatalogSource(Protocol):
    """
    Abstract interface for fetching canonical exercise definitions.

    Used by CatalogProvider, which falls back to the built-in catalog when
    the source fails or returns nothing.
    """

    def fetch_all(self) -> List[Dict[str, Any]]:
        """
        Fetch every catalog row.

        Each row carries at least ``id`` plus localized names, either flat
        (``en``, ``es``) or under ``display_names``, and optionally
        ``category``, ``type`` (``strength``/``cardio``) and ``bodyweight``.

        Returns:
            List of catalog row dictionaries, in display order

        Raises:
            CatalogLoadError: If the backend is unreachable or rejects the query
        """
        ...
