"""
Fake collaborator implementations and builders for testing.

This package provides in-memory fakes of the port interfaces plus factory
functions for workout history, so unit tests need no database or LLM.

Usage:
    from tests.fakes import FakeCatalogSource, create_workout

    provider = CatalogProvider()
    provider.load(FakeCatalogSource())

    workout = create_workout("2024-05-01", [("press banca", [(80, 10)])])
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from domain.models import Workout
from tests.fakes.catalog_source import FakeCatalogSource
from tests.fakes.narrative_client import FakeNarrativeClient

SetRow = Union[Tuple[float, int], Tuple[float, int, str], Dict[str, Any]]

_counter = {"workouts": 0}


def _set_dict(row: SetRow) -> Dict[str, Any]:
    if isinstance(row, dict):
        return row
    weight, reps, *rest = row
    return {"weight": weight, "reps": reps, "unit": rest[0] if rest else "kg"}


def create_workout(
    day: str,
    exercises: Sequence[Tuple[str, Sequence[SetRow]]],
    workout_id: Optional[str] = None,
    user_id: str = "user-1",
    body_weight: Optional[float] = None,
) -> Workout:
    """
    Build a Workout from compact set rows.

    Args:
        day: ISO date
        exercises: (name, sets) pairs; a set is (weight, reps[, unit]) or a raw dict
        workout_id: Id, or an auto-generated one
        user_id: Owner
        body_weight: Body weight logged with the workout

    Returns:
        Workout
    """
    if workout_id is None:
        _counter["workouts"] += 1
        workout_id = f"w{_counter['workouts']}"
    return Workout(
        id=workout_id,
        user_id=user_id,
        date=day,
        exercises=[
            {"name": name, "sets": [_set_dict(s) for s in sets]} for name, sets in exercises
        ],
        body_weight_at_time=body_weight,
    )


def create_history(
    exercise_name: str,
    days: Sequence[str],
    weight: float,
    reps: int,
    sets_per_day: int = 3,
    body_weight: Optional[float] = None,
) -> List[Workout]:
    """One workout per day, each with the same sets of one exercise."""
    return [
        create_workout(day, [(exercise_name, [(weight, reps)] * sets_per_day)], body_weight=body_weight)
        for day in days
    ]


__all__ = [
    "FakeCatalogSource",
    "FakeNarrativeClient",
    "create_workout",
    "create_history",
]
