"""
Tests for the Supabase catalog source.

The Supabase client is mocked; no database is required.
"""
import pytest
from unittest.mock import MagicMock, patch

from backend.core.catalog import CatalogProvider, CatalogState
from backend.core.errors import CatalogLoadError
from backend.settings import Settings
from infrastructure.db import SupabaseCatalogSource, create_catalog_source

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit


def _client_returning(data):
    client = MagicMock()
    query = client.table.return_value.select.return_value.order.return_value
    query.execute.return_value = MagicMock(data=data)
    return client


class TestSupabaseCatalogSource:
    """Test SupabaseCatalogSource against a mocked client."""

    def test_fetch_all_returns_rows(self):
        rows = [{"id": "squat", "en": "Squat", "es": "Sentadilla"}]
        client = _client_returning(rows)

        assert SupabaseCatalogSource(client).fetch_all() == rows
        client.table.assert_called_once_with("exercise_catalog")
        client.table.return_value.select.return_value.order.assert_called_once_with("es", desc=False)

    def test_custom_table(self):
        client = _client_returning([])
        SupabaseCatalogSource(client, table="catalog_v2").fetch_all()
        client.table.assert_called_once_with("catalog_v2")

    def test_none_data_is_empty(self):
        assert SupabaseCatalogSource(_client_returning(None)).fetch_all() == []

    def test_query_error_raises_catalog_load_error(self):
        client = MagicMock()
        client.table.side_effect = Exception("relation \"exercise_catalog\" does not exist")

        with pytest.raises(CatalogLoadError):
            SupabaseCatalogSource(client).fetch_all()


class TestProviderWithSupabase:
    def test_ready_with_rows(self):
        client = _client_returning([{"id": "squat", "en": "Squat", "es": "Sentadilla", "type": "strength"}])
        provider = CatalogProvider()
        provider.load(SupabaseCatalogSource(client))

        assert provider.state is CatalogState.READY
        assert [d.id for d in provider.catalog] == ["squat"]

    def test_fallback_on_error(self):
        client = MagicMock()
        client.table.side_effect = Exception("network down")
        provider = CatalogProvider()
        provider.load(SupabaseCatalogSource(client))

        assert provider.state is CatalogState.FALLBACK


class TestCreateCatalogSource:
    def test_none_without_credentials(self):
        assert create_catalog_source(Settings(_env_file=None, supabase_url=None, supabase_key=None)) is None

    def test_builds_source_from_settings(self):
        settings = Settings(
            _env_file=None,
            supabase_url="https://example.supabase.co",
            supabase_key="anon-key",
            catalog_table="catalog_v2",
        )
        with patch("infrastructure.db.catalog_repository.create_client") as create_client:
            source = create_catalog_source(settings)

        create_client.assert_called_once_with("https://example.supabase.co", "anon-key")
        assert isinstance(source, SupabaseCatalogSource)
