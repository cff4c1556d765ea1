"""
Supabase implementation of CatalogSource.

Reads the exercise catalog table, ordered by Spanish display name. Errors are
raised as CatalogLoadError so CatalogProvider can record the failure and keep
the built-in catalog.
"""
import logging
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from backend.core.errors import CatalogLoadError
from backend.settings import Settings

logger = logging.getLogger(__name__)


class SupabaseCatalogSource:
    """
    Supabase implementation of the CatalogSource protocol.

    Rows are returned as stored (``id``, ``en``, ``es``, ``category``,
    ``type``); turning them into definitions is the provider's job.
    """

    def __init__(self, client: Client, table: str = "exercise_catalog"):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            table: Catalog table name
        """
        self._client = client
        self._table = table

    def fetch_all(self) -> List[Dict[str, Any]]:
        """
        Fetch every catalog row.

        Returns:
            List of catalog row dictionaries, ordered by Spanish name

        Raises:
            CatalogLoadError: If the query fails
        """
        try:
            result = (
                self._client.table(self._table)
                .select("*")
                .order("es", desc=False)
                .execute()
            )
        except Exception as e:
            logger.exception(f"Error fetching catalog from {self._table}")
            raise CatalogLoadError(f"Could not read {self._table}: {e}") from e
        return result.data or []


def create_catalog_source(settings: Settings) -> Optional[SupabaseCatalogSource]:
    """
    Build a catalog source from settings.

    Returns:
        SupabaseCatalogSource, or None when Supabase is not configured
    """
    if not settings.has_remote_catalog:
        logger.warning("Supabase credentials not configured. Using built-in catalog only.")
        return None
    client = create_client(settings.supabase_url, settings.supabase_key)
    return SupabaseCatalogSource(client, table=settings.catalog_table)
