"""
Collaborator Interfaces (Ports) for the exercise metrics engine.

This package defines abstract interfaces that decouple the engine from
infrastructure (database, external AI services). Implementations are
provided in the infrastructure layer, and in tests/fakes for tests.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import CatalogSource

    class CatalogProvider:
        def load(self, source: CatalogSource):
            rows = source.fetch_all()
"""

# Exercise catalog rows
from application.ports.catalog_source import CatalogSource

# Narrative text generation
from application.ports.narrative_client import NarrativeClient

__all__ = [
    "CatalogSource",
    "NarrativeClient",
]
