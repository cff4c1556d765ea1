"""
Arena: compare several athletes' training histories.

Given each participant's workouts, this builds:
- Rankings by total volume, scored relative to the leader (0-100)
- The overall winner, or DRAW
- Head-to-head duels on every exercise all participants have a record for
- A best-lift matrix over every exercise anyone has done
- Per-user muscle-group focus

ArenaResult.to_summary() is the only shape handed to the narrative
collaborator: plain JSON-serializable numbers and labels, never workouts.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from backend.core.catalog import Catalog, CatalogProvider
from backend.core.exercise_matcher import (
    CanonicalResolver,
    create_resolver,
    localized_name,
    resolve_id,
)
from backend.core.metrics import OneRMFormula
from backend.core.muscle_groups import MuscleGroup, focus_breakdown, muscle_group
from backend.core.records_service import compute_records, entry_volume, performance_key
from backend.settings import Settings, get_settings
from domain.models import PersonalRecord, Workout

logger = logging.getLogger(__name__)

DRAW = "DRAW"
TIE = "EMPATE"

# Scores closer than this are the same score
SCORE_EPSILON = 1e-6
# Head-to-head values closer than this are a tie
HEAD_TO_HEAD_MARGIN = 0.1

EMPTY_CELL = "---"


@dataclass(frozen=True)
class ArenaUser:
    """One participant: a display name and their workout history."""
    name: str
    workouts: Sequence[Workout] = ()

    @classmethod
    def from_value(cls, value: Union["ArenaUser", Mapping[str, Any]]) -> "ArenaUser":
        if isinstance(value, ArenaUser):
            return value
        workouts = [
            w if isinstance(w, Workout) else Workout.model_validate(w)
            for w in value.get("workouts") or []
        ]
        return cls(name=str(value.get("name") or ""), workouts=workouts)


@dataclass
class UserStats:
    """Aggregates for one participant."""
    name: str
    total_volume_kg: float = 0.0
    training_days: int = 0
    records: Dict[str, PersonalRecord] = field(default_factory=dict)
    volume_by_group: Dict[MuscleGroup, float] = field(default_factory=dict)

    @property
    def focus(self):
        return focus_breakdown(self.volume_by_group)


@dataclass(frozen=True)
class Ranking:
    name: str
    raw_volume_kg: float
    score: float  # 0-100, relative to the highest volume
    rank: int


@dataclass(frozen=True)
class HeadToHeadEntry:
    user_name: str
    record: PersonalRecord


@dataclass(frozen=True)
class HeadToHead:
    """One exercise every participant has a record for, best first."""
    exercise_id: str
    exercise_name: str
    entries: List[HeadToHeadEntry]
    winner: str  # user name or TIE

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE


@dataclass
class ArenaResult:
    winner: str  # user name or DRAW
    rankings: List[Ranking]
    head_to_head: List[HeadToHead]
    matrix: List[Dict[str, str]]
    stats: List[UserStats]

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW

    def to_summary(self) -> Dict[str, Any]:
        """JSON-serializable summary for the narrative collaborator."""
        return {
            "winner": self.winner,
            "is_draw": self.is_draw,
            "rankings": [
                {
                    "name": r.name,
                    "volume_kg": round(r.raw_volume_kg),
                    "score": round(r.score, 1),
                    "rank": r.rank,
                }
                for r in self.rankings
            ],
            "head_to_head": [
                {
                    "exercise": h.exercise_name,
                    "winner": h.winner,
                    "entries": [
                        {
                            "user": e.user_name,
                            "value": round(e.record.comparison_value, 2),
                            "best_set": e.record.display_value,
                        }
                        for e in h.entries
                    ],
                }
                for h in self.head_to_head
            ],
            "matrix": self.matrix,
            "users": [
                {
                    "name": s.name,
                    "total_volume_kg": round(s.total_volume_kg),
                    "training_days": s.training_days,
                    "focus": [
                        {"group": group.value, "percent": percent} for group, percent in s.focus
                    ],
                }
                for s in self.stats
            ],
        }


def _user_stats(
    user: ArenaUser,
    catalog: Catalog,
    current_body_weight: float,
    formula: OneRMFormula,
    resolver: Optional[CanonicalResolver],
    locale: str,
) -> UserStats:
    stats = UserStats(name=user.name)
    volume_by_group: Dict[MuscleGroup, float] = defaultdict(float)

    for workout in user.workouts:
        body_weight = workout.effective_body_weight(current_body_weight)
        for entry in workout.exercises:
            exercise_id = resolve_id(entry.name, catalog, resolver)
            volume = entry_volume(entry, exercise_id, body_weight, catalog)
            stats.total_volume_kg += volume
            volume_by_group[muscle_group(exercise_id)] += volume

    stats.training_days = len({w.date for w in user.workouts})
    stats.records = compute_records(
        user.workouts, catalog, formula=formula, resolver=resolver, locale=locale
    )
    stats.volume_by_group = dict(volume_by_group)
    return stats


def _rankings(stats: List[UserStats]) -> List[Ranking]:
    ordered = sorted(stats, key=lambda s: s.total_volume_kg, reverse=True)
    max_volume = ordered[0].total_volume_kg if ordered else 0.0
    return [
        Ranking(
            name=s.name,
            raw_volume_kg=s.total_volume_kg,
            score=100 * s.total_volume_kg / max_volume if max_volume > 0 else 0.0,
            rank=position,
        )
        for position, s in enumerate(ordered, start=1)
    ]


def common_exercises(stats: List[UserStats]) -> List[str]:
    """Exercise ids every participant has a record for, in first-user order."""
    if not stats:
        return []
    shared = set(stats[0].records)
    for s in stats[1:]:
        shared &= set(s.records)
    return [exercise_id for exercise_id in stats[0].records if exercise_id in shared]


def _head_to_head(stats: List[UserStats], catalog: Catalog, locale: str) -> List[HeadToHead]:
    if len(stats) < 2:
        return []

    duels = []
    for exercise_id in common_exercises(stats):
        entries = sorted(
            (HeadToHeadEntry(s.name, s.records[exercise_id]) for s in stats),
            key=lambda e: performance_key(e.record),
            reverse=True,
        )
        first, second = entries[0].record, entries[1].record
        tied = (
            first.is_loaded == second.is_loaded
            and abs(first.comparison_value - second.comparison_value) < HEAD_TO_HEAD_MARGIN
        )
        duels.append(
            HeadToHead(
                exercise_id=exercise_id,
                exercise_name=localized_name(exercise_id, catalog, locale),
                entries=entries,
                winner=TIE if tied else entries[0].user_name,
            )
        )
    duels.sort(key=lambda h: (h.exercise_name, h.exercise_id))
    return duels


def _matrix(stats: List[UserStats], catalog: Catalog, locale: str) -> List[Dict[str, str]]:
    exercise_ids = {exercise_id for s in stats for exercise_id in s.records}
    rows = []
    for exercise_id in sorted(exercise_ids, key=lambda i: (localized_name(i, catalog, locale), i)):
        row = {"exercise": localized_name(exercise_id, catalog, locale)}
        for s in stats:
            record = s.records.get(exercise_id)
            row[s.name] = record.display_value if record is not None else EMPTY_CELL
        rows.append(row)
    return rows


def _winner(rankings: List[Ranking], stats: List[UserStats]) -> str:
    if not rankings:
        return DRAW
    if len(rankings) > 1:
        tied_top = abs(rankings[0].score - rankings[1].score) < SCORE_EPSILON
        if tied_top and not common_exercises(stats):
            return DRAW
    return rankings[0].name


def rank(
    users: Sequence[Union[ArenaUser, Mapping[str, Any]]],
    catalog: Catalog,
    *,
    current_body_weight: float,
    formula: OneRMFormula = "epley",
    resolver: Optional[CanonicalResolver] = None,
    locale: str = "es",
) -> ArenaResult:
    """
    Rank participants by training volume and compare their best lifts.

    A DRAW is declared when there are no participants, or when the top two
    scores are equal and no exercise is shared by everyone. With shared
    exercises, an equal top score still goes to the first-ranked user.

    Args:
        users: Participants as ArenaUser or ``{"name", "workouts"}`` mappings
        catalog: Catalog names are resolved against
        current_body_weight: Weight used for workouts that did not log one
        formula: 1RM formula for loaded sets
        resolver: Name resolution strategy
        locale: Locale for exercise names

    Returns:
        ArenaResult
    """
    participants = [ArenaUser.from_value(u) for u in users]
    stats = [
        _user_stats(u, catalog, current_body_weight, formula, resolver, locale)
        for u in participants
    ]

    rankings = _rankings(stats)
    winner = _winner(rankings, stats)
    head_to_head = _head_to_head(stats, catalog, locale)

    logger.info(
        f"Arena ranked {len(stats)} users: winner {winner}, "
        f"{len(head_to_head)} shared exercises"
    )
    return ArenaResult(
        winner=winner,
        rankings=rankings,
        head_to_head=head_to_head,
        matrix=_matrix(stats, catalog, locale),
        stats=stats,
    )


class ArenaService:
    """Arena ranking against the session catalog and settings."""

    def __init__(
        self,
        catalog_provider: CatalogProvider,
        settings: Optional[Settings] = None,
        resolver: Optional[CanonicalResolver] = None,
    ):
        self._catalog = catalog_provider
        self._settings = settings or get_settings()
        self._resolver = resolver or create_resolver(self._settings)

    def rank(
        self,
        users: Sequence[Union[ArenaUser, Mapping[str, Any]]],
        current_body_weight: Optional[float] = None,
    ) -> ArenaResult:
        return rank(
            users,
            self._catalog.catalog,
            current_body_weight=current_body_weight or self._settings.default_body_weight_kg,
            formula=self._settings.one_rm_formula,
            resolver=self._resolver,
            locale=self._settings.default_locale,
        )
