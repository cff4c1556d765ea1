"""
Exercise name resolution.

Maps a free-text or voice-transcribed exercise name to a canonical exercise
id from the catalog. Resolution runs in stages on normalized names and stops
at the first stage that matches:

1. Exact name match (any locale)
2. Prefix match: a catalog name starts with the input
3. Substring match: a catalog name contains the input
4. Fallback: the trimmed input itself becomes an ad-hoc id

Within a stage, the first catalog entry wins. FuzzyResolver adds a rapidfuzz
stage between 3 and 4 for callers that want typo tolerance.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

from rapidfuzz import fuzz

from backend.core.catalog import Catalog, lookup
from backend.core.normalize import normalize
from backend.settings import Settings

logger = logging.getLogger(__name__)


class MatchMethod(str, Enum):
    """How the match was determined."""
    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    FUZZY = "fuzzy"
    NONE = "none"


@dataclass(frozen=True)
class ResolutionResult:
    """Result of resolving one exercise name."""
    exercise_id: str
    method: MatchMethod
    score: float = 0.0  # 0.0 to 1.0

    @property
    def is_catalog_match(self) -> bool:
        return self.method != MatchMethod.NONE


class CanonicalResolver(Protocol):
    """Anything that turns an exercise name into a canonical id."""

    def resolve(self, name: Optional[str], catalog: Catalog) -> ResolutionResult:
        ...


def _normalized_names(catalog: Catalog) -> List[Tuple[str, str]]:
    """(exercise id, normalized name) pairs in catalog order."""
    return [
        (definition.id, normalize(display_name))
        for definition in catalog
        for display_name in definition.display_names.values()
        if display_name
    ]


_TIERS: Tuple[Tuple[MatchMethod, float, Callable[[str, str], bool]], ...] = (
    (MatchMethod.EXACT, 1.0, lambda candidate, query: candidate == query),
    (MatchMethod.PREFIX, 0.9, lambda candidate, query: candidate.startswith(query)),
    (MatchMethod.SUBSTRING, 0.8, lambda candidate, query: query in candidate),
)


class TieredResolver:
    """
    Default resolver: exact, then prefix, then substring, then fallback.

    Never raises. An empty or blank name resolves to "" so it cannot
    prefix-match the whole catalog.
    """

    def resolve(self, name: Optional[str], catalog: Catalog) -> ResolutionResult:
        trimmed = name.strip() if isinstance(name, str) else ""
        if not trimmed:
            return ResolutionResult(exercise_id="", method=MatchMethod.NONE)

        query = normalize(trimmed)
        names = _normalized_names(catalog)

        match = self._match_tiers(query, names)
        if match:
            return match

        return self._fallback(trimmed, catalog, names)

    def _match_tiers(
        self, query: str, names: List[Tuple[str, str]]
    ) -> Optional[ResolutionResult]:
        for method, score, matches in _TIERS:
            for exercise_id, candidate in names:
                if matches(candidate, query):
                    return ResolutionResult(exercise_id=exercise_id, method=method, score=score)
        return None

    def _fallback(
        self, trimmed: str, catalog: Catalog, names: List[Tuple[str, str]]
    ) -> ResolutionResult:
        logger.debug(f"No catalog match for '{trimmed}', using it as an ad-hoc id")
        return ResolutionResult(exercise_id=trimmed, method=MatchMethod.NONE)


class FuzzyResolver(TieredResolver):
    """
    Tiered resolution with a rapidfuzz stage before the fallback.

    Tolerates typos and word-order changes ("banca press") that the tiered
    stages miss. Only scores at or above ``threshold`` (0-100) are accepted.
    """

    def __init__(self, threshold: int = 85):
        self.threshold = threshold

    def _fallback(
        self, trimmed: str, catalog: Catalog, names: List[Tuple[str, str]]
    ) -> ResolutionResult:
        query = normalize(trimmed)
        best_id, best_score = None, 0.0
        for exercise_id, candidate in names:
            score = fuzz.token_set_ratio(query, candidate)
            if score > best_score:
                best_id, best_score = exercise_id, score

        if best_id is not None and best_score >= self.threshold:
            logger.debug(f"Fuzzy match '{trimmed}' -> {best_id} ({best_score:.0f})")
            return ResolutionResult(
                exercise_id=best_id, method=MatchMethod.FUZZY, score=best_score / 100
            )
        return super()._fallback(trimmed, catalog, names)


_default_resolver = TieredResolver()


def create_resolver(settings: Settings) -> CanonicalResolver:
    """Resolver configured by settings: fuzzy when enabled, tiered otherwise."""
    if settings.fuzzy_matching:
        return FuzzyResolver(threshold=settings.fuzzy_match_threshold)
    return _default_resolver


def resolve_id(
    name: Optional[str],
    catalog: Catalog,
    resolver: Optional[CanonicalResolver] = None,
) -> str:
    """
    Resolve an exercise name to its canonical id.

    Args:
        name: Exercise name as typed or transcribed
        catalog: Catalog to resolve against
        resolver: Resolution strategy (defaults to TieredResolver)

    Returns:
        Catalog id, or the trimmed input when nothing matches
    """
    return (resolver or _default_resolver).resolve(name, catalog).exercise_id


def localized_name(exercise_id: str, catalog: Catalog, locale: str = "es") -> str:
    """
    Display name for an id in the given locale.

    Falls back to any other translation, then to the id itself. Ad-hoc ids
    (not in the catalog) are returned capitalized.

    Examples:
        >>> localized_name("sled push", (), "en")
        'Sled push'
    """
    definition = lookup(exercise_id, catalog)
    if definition is None:
        return exercise_id[:1].upper() + exercise_id[1:]

    name = definition.name_for(locale)
    if name:
        return name
    return next((n for n in definition.display_names.values() if n), definition.id)
