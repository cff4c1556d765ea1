"""
Personal records and per-exercise statistics.

Everything here is recomputed from workout history on every call. Entry names
are resolved against the catalog fresh each time, so a catalog refresh is
picked up by the next computation without touching stored workouts.

Three views over the same history:
- compute_records: one PersonalRecord per canonical exercise
- compute_exercise_stats: the full statistics table for strength exercises
- exercise_history: best set per workout for one exercise, for charts
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple, Union

from backend.core.catalog import (
    Catalog,
    CatalogProvider,
    category_of,
    is_bodyweight_style,
    metric_type_of,
)
from backend.core.exercise_matcher import (
    CanonicalResolver,
    create_resolver,
    localized_name,
    resolve_id,
)
from backend.core.metrics import (
    OneRMFormula,
    cardio_minutes,
    comparison_value,
    estimated_1rm,
    set_volume,
)
from backend.settings import Settings, get_settings
from domain.models import (
    CardioSet,
    DailyMax,
    ExerciseEntry,
    ExerciseStats,
    HistoryPoint,
    MetricType,
    PersonalRecord,
    SetSnapshot,
    StrengthSet,
    Workout,
)

logger = logging.getLogger(__name__)

# best_near_max considers sets in this rep range, discounting higher reps
NEAR_MAX_REP_RANGE = (2, 10)


def _rep_factor(reps: int) -> float:
    if reps <= 6:
        return 1.0
    if reps <= 8:
        return 0.9
    return 0.8


def _chronological(workouts: Iterable[Workout]) -> List[Workout]:
    return sorted(workouts, key=lambda w: (w.date, w.id))


def performance_key(record: PersonalRecord) -> Tuple:
    """
    Sort key ordering records of one exercise from worst to best.

    Loaded sets rank above bodyweight sets. Loaded sets compare by estimated
    1RM, then raw weight, then reps; bodyweight sets by reps; cardio by
    distance.
    """
    if record.is_loaded:
        return (1, float(record.one_rep_max or 0), record.weight_kg, record.reps)
    return (0, record.value, 0.0, 0)


def _beats(candidate: PersonalRecord, current: PersonalRecord) -> bool:
    candidate_key, current_key = performance_key(candidate), performance_key(current)
    if candidate_key != current_key:
        return candidate_key > current_key
    # exact tie: the earliest set keeps the record
    return (candidate.achieved_date, candidate.workout_id) < (current.achieved_date, current.workout_id)


def _record_from_set(
    set_record: Union[StrengthSet, CardioSet],
    exercise_id: str,
    metric_type: MetricType,
    workout: Workout,
    catalog: Catalog,
    formula: OneRMFormula,
    locale: str,
) -> Optional[PersonalRecord]:
    value = comparison_value(set_record, metric_type, formula)
    if value <= 0:
        return None

    common = dict(
        canonical_exercise_id=exercise_id,
        exercise_name=localized_name(exercise_id, catalog, locale),
        category=category_of(exercise_id, catalog),
        metric_type=metric_type,
        achieved_date=workout.date,
        workout_id=workout.id,
    )
    if isinstance(set_record, CardioSet):
        return PersonalRecord(value=value, display_unit="km", is_bodyweight=False, **common)
    if set_record.is_bodyweight:
        return PersonalRecord(
            value=float(set_record.reps),
            display_unit="reps",
            is_bodyweight=True,
            reps=set_record.reps,
            **common,
        )
    return PersonalRecord(
        value=set_record.weight_kg,
        display_unit="kg",
        is_bodyweight=False,
        one_rep_max=value,
        reps=set_record.reps,
        weight_kg=set_record.weight_kg,
        logged_weight=set_record.weight,
        logged_unit=set_record.unit,
        **common,
    )


def compute_records(
    workouts: Iterable[Workout],
    catalog: Catalog,
    *,
    formula: OneRMFormula = "epley",
    resolver: Optional[CanonicalResolver] = None,
    locale: str = "es",
) -> Dict[str, PersonalRecord]:
    """
    Best qualifying set per canonical exercise.

    Sets whose comparison value is not positive (no reps, no distance) never
    become records. Records are only ever compared within one canonical id,
    and the result does not depend on the order of ``workouts``.

    Args:
        workouts: Workout history, any order
        catalog: Catalog names are resolved against
        formula: 1RM formula for loaded sets
        resolver: Name resolution strategy (defaults to tiered matching)
        locale: Locale for ``exercise_name``

    Returns:
        Records keyed by canonical exercise id
    """
    records: Dict[str, PersonalRecord] = {}

    for workout in workouts:
        for entry in workout.exercises:
            exercise_id = resolve_id(entry.name, catalog, resolver)
            if not exercise_id:
                continue
            metric_type = metric_type_of(exercise_id, catalog, entry.type)

            for set_record in entry.sets:
                candidate = _record_from_set(
                    set_record, exercise_id, metric_type, workout, catalog, formula, locale
                )
                if candidate is None:
                    continue
                current = records.get(exercise_id)
                if current is None or _beats(candidate, current):
                    records[exercise_id] = candidate

    logger.debug(f"Computed {len(records)} personal records")
    return records


def entry_volume(
    entry: ExerciseEntry,
    exercise_id: str,
    body_weight: float,
    catalog: Catalog,
) -> float:
    bodyweight_style = is_bodyweight_style(exercise_id, catalog)
    return sum(
        set_volume(s, body_weight, bodyweight_style, unilateral=entry.unilateral)
        for s in entry.sets
    )


def workout_volume(
    workout: Workout,
    catalog: Catalog,
    current_body_weight: float,
    resolver: Optional[CanonicalResolver] = None,
) -> float:
    """Total volume of a workout in kg, using the body weight logged with it."""
    body_weight = workout.effective_body_weight(current_body_weight)
    return sum(
        entry_volume(entry, resolve_id(entry.name, catalog, resolver), body_weight, catalog)
        for entry in workout.exercises
    )


@dataclass(frozen=True)
class _LoggedSet:
    """A strength set flattened out of history, with loads in kg."""
    day: date
    workout_id: str
    load_kg: float  # includes body mass for bodyweight-style exercises
    reps: int
    volume_kg: float
    body_weight: float
    added_weight: bool


def _stats_for(
    exercise_id: str,
    sets: List[_LoggedSet],
    catalog: Catalog,
    formula: OneRMFormula,
    locale: str,
) -> ExerciseStats:
    bodyweight_style = is_bodyweight_style(exercise_id, catalog)
    stats = ExerciseStats(
        exercise_id=exercise_id,
        exercise_name=localized_name(exercise_id, catalog, locale),
        category=category_of(exercise_id, catalog),
        is_bodyweight=bodyweight_style,
    )
    daily: Dict[date, Tuple[float, int]] = {}

    for s in sets:
        stats.total_volume_kg += s.volume_kg

        if stats.best_single_set is None or s.volume_kg > stats.best_single_set.volume_kg:
            stats.best_single_set = SetSnapshot(s.load_kg, s.reps, s.day, s.workout_id, s.volume_kg)

        one_rm = estimated_1rm(s.load_kg, s.reps, formula)
        if one_rm > stats.max_1rm_kg:
            stats.max_1rm_kg = one_rm
            stats.max_1rm_date = s.day

        if s.load_kg > stats.max_weight_kg or (
            s.load_kg == stats.max_weight_kg and s.reps > stats.max_weight_reps
        ):
            stats.max_weight_kg = s.load_kg
            stats.max_weight_reps = s.reps
            stats.max_weight_date = s.day

        # added-weight sets of a bodyweight movement do not count towards max reps
        counts_for_reps = not (bodyweight_style and s.added_weight)
        if counts_for_reps and s.reps > stats.max_reps:
            stats.max_reps = s.reps
            stats.max_reps_date = s.day

        best_load, best_reps = daily.get(s.day, (0.0, 0))
        if s.load_kg > best_load or (s.load_kg == best_load and s.reps > best_reps):
            daily[s.day] = (s.load_kg, s.reps)

    stats.daily_max = [
        DailyMax(day=day, max_weight_kg=load, max_reps=reps)
        for day, (load, reps) in sorted(daily.items(), reverse=True)
    ]
    stats.best_near_max = _best_near_max(sets, stats, bodyweight_style)
    return stats


def _best_near_max(
    sets: List[_LoggedSet], stats: ExerciseStats, bodyweight_style: bool
) -> Optional[SetSnapshot]:
    """
    The hardest set relative to the athlete's own maximum.

    Pure bodyweight work scores sets by how close they come to the rep max.
    Everything else scores 2-10 rep sets by squared share of the max load,
    discounted for higher reps.
    """
    best: Optional[_LoggedSet] = None
    best_score = -1.0

    only_bodyweight = bodyweight_style and not any(s.added_weight for s in sets)
    if only_bodyweight and stats.max_reps > 0:
        for s in sets:
            if s.reps < 2:
                continue
            score = (s.reps / stats.max_reps) ** 2
            if score > best_score or (score == best_score and best is not None and s.reps > best.reps):
                best, best_score = s, score
    elif stats.max_weight_kg > 0:
        low, high = NEAR_MAX_REP_RANGE
        for s in sets:
            if not low <= s.reps <= high:
                continue
            score = (s.load_kg / stats.max_weight_kg) ** 2 * _rep_factor(s.reps)
            if score > best_score or (score == best_score and best is not None and s.load_kg > best.load_kg):
                best, best_score = s, score

    if best is None:
        return None
    load = best.body_weight if only_bodyweight else best.load_kg
    return SetSnapshot(load, best.reps, best.day, best.workout_id, best.volume_kg)


def compute_exercise_stats(
    workouts: Iterable[Workout],
    catalog: Catalog,
    *,
    current_body_weight: float,
    formula: OneRMFormula = "epley",
    resolver: Optional[CanonicalResolver] = None,
    locale: str = "es",
) -> Dict[str, ExerciseStats]:
    """
    Lifetime statistics per strength exercise.

    Loads are real kilograms lifted: pounds converted, unilateral weights
    doubled, body mass added for bodyweight-style movements. Sets without
    reps are ignored. Exercises that end up with no data are left out.

    Args:
        workouts: Workout history, any order
        catalog: Catalog names are resolved against
        current_body_weight: Profile weight for workouts that did not log one
        formula: 1RM formula
        resolver: Name resolution strategy
        locale: Locale for ``exercise_name``

    Returns:
        Stats keyed by canonical exercise id
    """
    grouped: Dict[str, List[_LoggedSet]] = defaultdict(list)

    for workout in _chronological(workouts):
        body_weight = workout.effective_body_weight(current_body_weight)
        for entry in workout.exercises:
            exercise_id = resolve_id(entry.name, catalog, resolver)
            if not exercise_id:
                continue
            if metric_type_of(exercise_id, catalog, entry.type) == MetricType.CARDIO:
                continue
            bodyweight_style = is_bodyweight_style(exercise_id, catalog)

            for s in entry.sets:
                if not isinstance(s, StrengthSet) or s.reps <= 0:
                    continue
                external = s.weight_kg * (2 if entry.unilateral or s.is_unilateral else 1)
                load = external + body_weight if bodyweight_style else external
                grouped[exercise_id].append(
                    _LoggedSet(
                        day=workout.date,
                        workout_id=workout.id,
                        load_kg=load,
                        reps=s.reps,
                        volume_kg=set_volume(s, body_weight, bodyweight_style, entry.unilateral),
                        body_weight=body_weight,
                        added_weight=s.weight > 0,
                    )
                )

    result = {}
    for exercise_id, sets in grouped.items():
        stats = _stats_for(exercise_id, sets, catalog, formula, locale)
        if stats.has_data:
            result[exercise_id] = stats
        logger.debug(
            f"{exercise_id}: {len(sets)} sets, volume {stats.total_volume_kg:.0f}kg, "
            f"max {stats.max_weight_kg:.1f}kg"
        )
    return result


def exercise_history(
    workouts: Iterable[Workout],
    exercise_id: str,
    catalog: Catalog,
    *,
    formula: OneRMFormula = "epley",
    resolver: Optional[CanonicalResolver] = None,
    locale: str = "es",
) -> List[HistoryPoint]:
    """
    Best set of each workout for one exercise, oldest first.

    Workouts where the exercise has no qualifying set are skipped.
    """
    history = []
    for workout in _chronological(workouts):
        best: Optional[PersonalRecord] = None
        best_set: Union[StrengthSet, CardioSet, None] = None

        for entry in workout.exercises:
            if resolve_id(entry.name, catalog, resolver) != exercise_id:
                continue
            metric_type = metric_type_of(exercise_id, catalog, entry.type)
            for s in entry.sets:
                candidate = _record_from_set(
                    s, exercise_id, metric_type, workout, catalog, formula, locale
                )
                if candidate is None:
                    continue
                if best is None or performance_key(candidate) > performance_key(best):
                    best, best_set = candidate, s

        if best is None:
            continue
        if isinstance(best_set, CardioSet):
            point = HistoryPoint(
                day=workout.date,
                value=best.value,
                unit="km",
                secondary_value=cardio_minutes(best_set),
            )
        elif best.is_bodyweight:
            point = HistoryPoint(
                day=workout.date, value=best.value, unit="reps", reps=best.reps, is_bodyweight=True
            )
        else:
            point = HistoryPoint(
                day=workout.date,
                value=best.logged_weight,
                unit=best.logged_unit,
                reps=best.reps,
                secondary_value=float(best.one_rep_max or 0),
            )
        history.append(point)
    return history


def group_by_category(records: Iterable[PersonalRecord]) -> Dict[str, List[PersonalRecord]]:
    """Records grouped by catalog category, categories and names sorted."""
    groups: Dict[str, List[PersonalRecord]] = defaultdict(list)
    for record in records:
        groups[record.category or "General"].append(record)
    return {
        category: sorted(groups[category], key=lambda r: r.exercise_name)
        for category in sorted(groups)
    }


class RecordsService:
    """
    Records, statistics and history against the session catalog.

    Usage:
        service = RecordsService(provider)
        records = service.records(workouts)
        stats = service.exercise_stats(workouts, current_body_weight=72.5)
    """

    def __init__(
        self,
        catalog_provider: CatalogProvider,
        settings: Optional[Settings] = None,
        resolver: Optional[CanonicalResolver] = None,
    ):
        self._catalog = catalog_provider
        self._settings = settings or get_settings()
        self._resolver = resolver or create_resolver(self._settings)

    def records(self, workouts: Iterable[Workout]) -> Dict[str, PersonalRecord]:
        return compute_records(
            workouts,
            self._catalog.catalog,
            formula=self._settings.one_rm_formula,
            resolver=self._resolver,
            locale=self._settings.default_locale,
        )

    def records_by_category(self, workouts: Iterable[Workout]) -> Dict[str, List[PersonalRecord]]:
        return group_by_category(self.records(workouts).values())

    def exercise_stats(
        self,
        workouts: Iterable[Workout],
        current_body_weight: Optional[float] = None,
    ) -> Dict[str, ExerciseStats]:
        return compute_exercise_stats(
            workouts,
            self._catalog.catalog,
            current_body_weight=current_body_weight or self._settings.default_body_weight_kg,
            formula=self._settings.one_rm_formula,
            resolver=self._resolver,
            locale=self._settings.default_locale,
        )

    def history(self, workouts: Iterable[Workout], exercise_name: str) -> List[HistoryPoint]:
        """History for an exercise given by id or by any name that resolves to it."""
        catalog = self._catalog.catalog
        exercise_id = resolve_id(exercise_name, catalog, self._resolver)
        return exercise_history(
            workouts,
            exercise_id,
            catalog,
            formula=self._settings.one_rm_formula,
            resolver=self._resolver,
            locale=self._settings.default_locale,
        )
