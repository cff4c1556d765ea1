"""
Exercise catalog: the built-in definitions and the provider that swaps in the
remote catalog once it loads.

The catalog is a tuple of frozen ExerciseDefinition objects. It is never
patched in place; a refresh builds a new tuple and replaces the old one in a
single assignment, so readers see either the old catalog or the new one.
"""
import logging
import pathlib
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError

from application.ports import CatalogSource
from backend.core.normalize import normalize
from domain.models import ExerciseDefinition, MetricType

logger = logging.getLogger(__name__)

ROOT = pathlib.Path(__file__).resolve().parents[2]
CATALOG_PATH = ROOT / "shared/dictionaries/exercise_catalog.yaml"

Catalog = Tuple[ExerciseDefinition, ...]

# Keyword rules for exercises that are not in the catalog.
_DIP = re.compile(r"\bdips?\b|\bfondos?\b")
_PULL_UP = re.compile(r"\b(pull[ _]?ups?|chin[ _]?ups?|muscle[ _]?ups?|dominadas?)\b")
_NOT_BODYWEIGHT = ("cable", "machine", "maquina", "polea", "face")


def build_catalog(rows: Iterable[Dict[str, Any]]) -> Catalog:
    """
    Turn catalog rows into definitions, keeping row order.

    Rows that cannot be read (no id, wrong types) are skipped with a warning
    rather than failing the whole catalog.
    """
    definitions = []
    seen = set()
    for row in rows:
        try:
            definition = ExerciseDefinition.from_record(row)
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"Skipping unreadable catalog row {row!r}: {e}")
            continue
        if definition.id in seen:
            logger.warning(f"Duplicate catalog id {definition.id}, keeping the first")
            continue
        seen.add(definition.id)
        definitions.append(definition)
    return tuple(definitions)


@lru_cache(maxsize=None)
def load_static_catalog(path: pathlib.Path = CATALOG_PATH) -> Catalog:
    """Load the built-in catalog shipped with the package."""
    rows = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    catalog = build_catalog(rows)
    logger.debug(f"Loaded {len(catalog)} built-in exercises from {path.name}")
    return catalog


def lookup(exercise_id: str, catalog: Catalog) -> Optional[ExerciseDefinition]:
    return next((d for d in catalog if d.id == exercise_id), None)


def is_bodyweight_style(exercise_id: str, catalog: Catalog) -> bool:
    """
    Check whether an exercise moves the lifter's own mass.

    Catalog entries carry an explicit flag. Unregistered exercises fall back
    to keyword rules: dips and pull-up/chin-up variants count, unless the name
    points at a cable or machine version.
    """
    definition = lookup(exercise_id, catalog)
    if definition is not None:
        return definition.bodyweight

    text = normalize(exercise_id).replace("_", " ")
    if any(word in text for word in _NOT_BODYWEIGHT):
        return False
    if _DIP.search(text):
        return True
    return bool(_PULL_UP.search(text)) and "row" not in text


def metric_type_of(
    exercise_id: str,
    catalog: Catalog,
    reported: Optional[MetricType] = None,
) -> MetricType:
    """Metric type from the catalog, else what the producer reported, else strength."""
    definition = lookup(exercise_id, catalog)
    if definition is not None:
        return definition.metric_type
    return reported or MetricType.STRENGTH


def category_of(exercise_id: str, catalog: Catalog, default: str = "General") -> str:
    definition = lookup(exercise_id, catalog)
    return definition.category if definition is not None else default


class CatalogState(str, Enum):
    """Where the catalog a reader sees came from."""
    LOADING = "loading"    # remote catalog requested, built-in catalog in use meanwhile
    READY = "ready"        # remote catalog loaded
    FALLBACK = "fallback"  # remote catalog failed or was empty, built-in catalog in use


@dataclass(frozen=True)
class CatalogSnapshot:
    """An immutable view of the catalog together with its provenance."""
    state: CatalogState
    definitions: Catalog
    error: Optional[str] = None

    def __len__(self) -> int:
        return len(self.definitions)


class CatalogProvider:
    """
    Holds the session's catalog and its load state.

    Starts in LOADING with the built-in catalog so resolution always has
    entries to work with. ``load()`` moves to READY or FALLBACK. Pass the
    provider (or its ``catalog``) to the services that need it instead of
    reaching for a module-level cache.

    Usage:
        provider = CatalogProvider()
        provider.load(SupabaseCatalogSource(client))
        if provider.state is CatalogState.FALLBACK:
            ...
        resolve_id("press banca", provider.catalog)
    """

    def __init__(self, static_catalog: Optional[Catalog] = None):
        self._static = static_catalog if static_catalog is not None else load_static_catalog()
        self._snapshot = CatalogSnapshot(CatalogState.LOADING, self._static)

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def state(self) -> CatalogState:
        return self._snapshot.state

    @property
    def catalog(self) -> Catalog:
        return self._snapshot.definitions

    def load(self, source: CatalogSource) -> CatalogSnapshot:
        """
        Fetch the catalog from ``source`` and replace the current one.

        Never raises: a failing or empty source leaves the provider in
        FALLBACK with the built-in catalog.
        """
        try:
            rows = source.fetch_all()
        except Exception as e:
            logger.warning(f"Catalog source failed, using built-in catalog: {e}")
            snapshot = CatalogSnapshot(CatalogState.FALLBACK, self._static, error=str(e))
        else:
            definitions = build_catalog(rows or [])
            if definitions:
                logger.info(f"Loaded {len(definitions)} exercises from catalog source")
                snapshot = CatalogSnapshot(CatalogState.READY, definitions)
            else:
                logger.warning("Catalog source returned no exercises, using built-in catalog")
                snapshot = CatalogSnapshot(
                    CatalogState.FALLBACK, self._static, error="empty catalog"
                )

        self._snapshot = snapshot
        return snapshot
