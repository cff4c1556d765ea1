"""
Infrastructure layer for the exercise metrics engine.

This package contains concrete implementations of the port interfaces:
- db/: Supabase database implementations
"""

from infrastructure.db import SupabaseCatalogSource, create_catalog_source

__all__ = [
    "SupabaseCatalogSource",
    "create_catalog_source",
]
