"""
Infrastructure Database Layer.

Supabase-backed implementations of the interfaces defined in
application.ports, injected into the engine instead of used as globals.

Usage:
    from supabase import create_client
    from infrastructure.db import SupabaseCatalogSource

    client = create_client(url, key)
    provider.load(SupabaseCatalogSource(client))
"""

from infrastructure.db.catalog_repository import SupabaseCatalogSource, create_catalog_source

__all__ = [
    "SupabaseCatalogSource",
    "create_catalog_source",
]
