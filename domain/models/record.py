"""
Derived performance records.

Nothing here is persisted: records are recomputed from workout history on
every read.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from domain.models.exercise import MetricType


@dataclass(frozen=True)
class PersonalRecord:
    """Best qualifying set for one canonical exercise."""
    canonical_exercise_id: str
    exercise_name: str
    value: float  # kg for loaded sets, reps for bodyweight sets, km for cardio
    display_unit: str  # "kg", "reps" or "km"
    is_bodyweight: bool
    achieved_date: date
    metric_type: MetricType = MetricType.STRENGTH
    category: str = "General"
    one_rep_max: Optional[float] = None
    reps: int = 0
    weight_kg: float = 0.0
    logged_weight: float = 0.0
    logged_unit: str = "kg"
    workout_id: str = ""

    @property
    def is_loaded(self) -> bool:
        return self.metric_type == MetricType.STRENGTH and not self.is_bodyweight

    @property
    def comparison_value(self) -> float:
        """Number this record is ranked by: estimated 1RM when loaded, else ``value``."""
        if self.is_loaded:
            return float(self.one_rep_max or 0)
        return self.value

    @property
    def display_value(self) -> str:
        if self.metric_type == MetricType.CARDIO:
            return f"{_fmt(self.value)}km"
        if self.is_bodyweight:
            return f"{self.reps} reps"
        return f"{_fmt(self.logged_weight)}{self.logged_unit} x {self.reps}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise_id": self.canonical_exercise_id,
            "exercise_name": self.exercise_name,
            "category": self.category,
            "metric_type": self.metric_type.value,
            "value": round(self.value, 2),
            "unit": self.display_unit,
            "is_bodyweight": self.is_bodyweight,
            "one_rep_max": self.one_rep_max,
            "reps": self.reps,
            "display": self.display_value,
            "achieved_at": self.achieved_date.isoformat(),
        }


@dataclass(frozen=True)
class SetSnapshot:
    """A single set picked out of history (best set, near-max set...)."""
    weight_kg: float
    reps: int
    achieved_date: date
    workout_id: str = ""
    volume_kg: float = 0.0


@dataclass(frozen=True)
class DailyMax:
    """Heaviest load of a training day, with reps as the tie-break."""
    day: date
    max_weight_kg: float
    max_reps: int


@dataclass
class ExerciseStats:
    """
    Lifetime statistics for one strength exercise.

    Loads include body mass for bodyweight-style movements, so a weighted
    pull-up with 10kg added at 80kg body weight counts as 90kg.
    """
    exercise_id: str
    exercise_name: str
    category: str = "General"
    is_bodyweight: bool = False
    total_volume_kg: float = 0.0

    max_weight_kg: float = 0.0
    max_weight_reps: int = 0
    max_weight_date: Optional[date] = None

    max_1rm_kg: float = 0.0
    max_1rm_date: Optional[date] = None

    max_reps: int = 0
    max_reps_date: Optional[date] = None

    best_single_set: Optional[SetSnapshot] = None
    best_near_max: Optional[SetSnapshot] = None
    daily_max: List[DailyMax] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return (
            self.total_volume_kg > 0
            or self.max_weight_kg > 0
            or self.max_reps > 0
            or self.max_1rm_kg > 0
        )


@dataclass(frozen=True)
class HistoryPoint:
    """Best set of one workout, for progress charts."""
    day: date
    value: float  # weight, reps or km depending on the set
    unit: str
    reps: int = 0
    secondary_value: float = 0.0  # estimated 1RM for loaded sets, minutes for cardio
    is_bodyweight: bool = False

    @property
    def label(self) -> str:
        if self.unit == "km":
            return f"{_fmt(self.value)}km"
        if self.is_bodyweight:
            return f"{self.reps} reps"
        return f"{_fmt(self.value)}{self.unit}"


def _fmt(value: float) -> str:
    """Render 80.0 as '80' and 82.5 as '82.5'."""
    return f"{value:g}"
