"""
Lifetime vs. this-month progress report for one athlete.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from backend.core.catalog import Catalog, is_bodyweight_style, metric_type_of
from backend.core.exercise_matcher import CanonicalResolver, localized_name, resolve_id
from backend.core.metrics import set_volume
from domain.models import MetricType, StrengthSet, Workout

logger = logging.getLogger(__name__)

# Entries sent to the narrative collaborator
SUMMARY_MAX_ENTRIES = 20


@dataclass(frozen=True)
class MaxComparison:
    """Best set ever vs. best set this month for one exercise."""
    exercise_id: str
    exercise_name: str
    global_max: float
    monthly_max: float
    unit: str  # "kg" or "reps"
    is_bodyweight: bool


@dataclass
class ProgressReport:
    month: date  # first day of the reported month
    total_volume_kg: float = 0.0
    monthly_volume_kg: float = 0.0
    training_days: int = 0
    monthly_training_days: int = 0
    max_comparison: List[MaxComparison] = field(default_factory=list)

    def to_summary(self, body_weight_kg: Optional[float] = None) -> Dict[str, Any]:
        """JSON-serializable summary for the narrative collaborator."""
        summary = {
            "month": self.month.strftime("%Y-%m"),
            "total_volume_kg": round(self.total_volume_kg),
            "monthly_volume_kg": round(self.monthly_volume_kg),
            "training_days": self.training_days,
            "monthly_training_days": self.monthly_training_days,
            "max_comparison": [
                {
                    "exercise": m.exercise_name,
                    "global_max": round(m.global_max, 2),
                    "monthly_max": round(m.monthly_max, 2),
                    "unit": m.unit,
                    "is_bodyweight": m.is_bodyweight,
                }
                for m in self.max_comparison[:SUMMARY_MAX_ENTRIES]
            ],
        }
        if body_weight_kg:
            summary["body_weight_kg"] = body_weight_kg
        return summary


# Keyed by (exercise id, is loaded): loaded sets compare kg, bodyweight sets reps
_BestKey = Tuple[str, bool]


def _keep_best(bests: Dict[_BestKey, float], exercise_id: str, s: StrengthSet) -> None:
    key = (exercise_id, not s.is_bodyweight)
    value = float(s.reps) if s.is_bodyweight else s.weight_kg
    if value > bests.get(key, 0.0):
        bests[key] = value


def build_progress_report(
    workouts: Iterable[Workout],
    catalog: Catalog,
    *,
    reference_date: date,
    current_body_weight: float,
    resolver: Optional[CanonicalResolver] = None,
    locale: str = "es",
) -> ProgressReport:
    """
    Compare lifetime training with the calendar month of ``reference_date``.

    Volume uses each workout's own body weight, falling back to
    ``current_body_weight``. The max comparison covers strength exercises
    trained this month only, sorted by this month's max, largest first.
    """
    month = reference_date.replace(day=1)
    report = ProgressReport(month=month)

    global_best: Dict[_BestKey, float] = {}
    monthly_best: Dict[_BestKey, float] = {}
    days, monthly_days = set(), set()

    for workout in workouts:
        this_month = (workout.date.year, workout.date.month) == (month.year, month.month)
        body_weight = workout.effective_body_weight(current_body_weight)
        days.add(workout.date)
        if this_month:
            monthly_days.add(workout.date)

        for entry in workout.exercises:
            exercise_id = resolve_id(entry.name, catalog, resolver)
            if not exercise_id:
                continue
            bodyweight_style = is_bodyweight_style(exercise_id, catalog)
            is_cardio = metric_type_of(exercise_id, catalog, entry.type) == MetricType.CARDIO

            for s in entry.sets:
                volume = set_volume(s, body_weight, bodyweight_style, entry.unilateral)
                report.total_volume_kg += volume
                if this_month:
                    report.monthly_volume_kg += volume

                if is_cardio or not isinstance(s, StrengthSet) or s.reps <= 0:
                    continue
                _keep_best(global_best, exercise_id, s)
                if this_month:
                    _keep_best(monthly_best, exercise_id, s)

    report.training_days = len(days)
    report.monthly_training_days = len(monthly_days)

    # one row per exercise trained this month; loaded sets take precedence
    monthly_kind: Dict[str, bool] = {}
    for exercise_id, loaded in monthly_best:
        monthly_kind[exercise_id] = monthly_kind.get(exercise_id, False) or loaded

    comparison = []
    for exercise_id, loaded in monthly_kind.items():
        key = (exercise_id, loaded)
        comparison.append(
            MaxComparison(
                exercise_id=exercise_id,
                exercise_name=localized_name(exercise_id, catalog, locale),
                global_max=global_best[key],
                monthly_max=monthly_best[key],
                unit="kg" if loaded else "reps",
                is_bodyweight=not loaded,
            )
        )
    comparison.sort(key=lambda m: m.monthly_max, reverse=True)
    report.max_comparison = comparison

    logger.debug(
        f"Progress report {month:%Y-%m}: {report.monthly_volume_kg:.0f}kg this month, "
        f"{report.total_volume_kg:.0f}kg total"
    )
    return report
