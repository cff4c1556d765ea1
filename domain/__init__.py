"""
Domain layer for the exercise metrics engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    CardioSet,
    ExerciseDefinition,
    ExerciseEntry,
    MetricType,
    PersonalRecord,
    StrengthSet,
    Workout,
)

__all__ = [
    "CardioSet",
    "ExerciseDefinition",
    "ExerciseEntry",
    "MetricType",
    "PersonalRecord",
    "StrengthSet",
    "Workout",
]
