"""
Domain models for the exercise metrics engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core concepts:
- ExerciseDefinition: Canonical catalog entry an exercise name resolves to
- StrengthSet / CardioSet: The two variants of a performed set (SetRecord)
- ExerciseEntry: One exercise as performed in a workout
- Workout: A dated list of entries with the athlete's body weight at the time
- PersonalRecord / ExerciseStats / HistoryPoint: Derived, never persisted

Usage:
    >>> from domain.models import Workout

    >>> workout = Workout(
    ...     id="w1",
    ...     user_id="ana",
    ...     date="2024-01-01",
    ...     exercises=[{"name": "press banca", "sets": [{"reps": 10, "weight": 80, "unit": "kg"}]}],
    ...     body_weight_at_time=62,
    ... )
    >>> workout.exercises[0].sets[0].weight
    80.0
"""

from domain.models.exercise import ExerciseDefinition, MetricType
from domain.models.record import (
    DailyMax,
    ExerciseStats,
    HistoryPoint,
    PersonalRecord,
    SetSnapshot,
)
from domain.models.sets import LBS_TO_KG, CardioSet, SetRecord, StrengthSet
from domain.models.workout import ExerciseEntry, Workout

__all__ = [
    # Catalog
    "ExerciseDefinition",
    "MetricType",
    # Workout data
    "Workout",
    "ExerciseEntry",
    "SetRecord",
    "StrengthSet",
    "CardioSet",
    "LBS_TO_KG",
    # Derived records
    "PersonalRecord",
    "ExerciseStats",
    "SetSnapshot",
    "DailyMax",
    "HistoryPoint",
]
