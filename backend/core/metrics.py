"""
Per-set training metrics: unit conversion, volume, estimated 1RM and the
single comparable number used to rank sets against each other.

All functions are pure and total. Malformed input was already coerced to
zero by the set models, so nothing here raises on bad data.
"""
import math
from typing import Literal, Optional, Union

from domain.models import LBS_TO_KG, CardioSet, MetricType, StrengthSet

OneRMFormula = Literal["epley", "brzycki"]

# Brzycki is undefined past ~37 reps; cap well before that
BRZYCKI_MAX_REPS = 30


def to_kg(weight: float, unit: Optional[str]) -> float:
    """Convert a logged weight to kilograms."""
    if unit == "lbs":
        return weight * LBS_TO_KG
    return weight


def set_volume(
    set_record: Union[StrengthSet, CardioSet],
    body_weight: float,
    is_bodyweight_style: bool,
    unilateral: bool = False,
) -> float:
    """
    Training volume of one set in kg.

    Args:
        set_record: The performed set
        body_weight: Athlete's body weight at the time of the workout (kg)
        is_bodyweight_style: Whether the exercise moves the athlete's own mass
        unilateral: Entry-level flag; logged weight is per side

    Returns:
        Volume in kg. Cardio sets and sets with no reps contribute 0.

    Examples:
        >>> set_volume(StrengthSet(reps=10, weight=80), 75, False)
        800.0
        >>> set_volume(StrengthSet(reps=8, weight=10), 80, True)
        720.0
    """
    if not isinstance(set_record, StrengthSet) or set_record.reps <= 0:
        return 0.0

    external = set_record.weight_kg
    if unilateral or set_record.is_unilateral:
        external *= 2

    if is_bodyweight_style:
        volume = (body_weight + external) * set_record.reps
    elif set_record.is_bodyweight:
        volume = body_weight * set_record.reps
    else:
        volume = external * set_record.reps
    return volume if math.isfinite(volume) else 0.0


def estimated_1rm(weight_kg: float, reps: int, formula: OneRMFormula = "epley") -> float:
    """
    Estimated one-rep max, rounded to the nearest kg.

    A single rep is its own 1RM. Non-positive weight or reps give 0.

    Examples:
        >>> estimated_1rm(80, 10)
        107
        >>> estimated_1rm(100, 5, "brzycki")
        113
    """
    if not math.isfinite(weight_kg) or weight_kg <= 0 or reps <= 0:
        return 0
    if reps == 1:
        return weight_kg
    if formula == "epley":
        estimate = weight_kg * (1 + reps / 30)
    elif formula == "brzycki":
        r = min(reps, BRZYCKI_MAX_REPS)
        estimate = weight_kg / (1.0278 - 0.0278 * r)
    else:
        raise ValueError(f"Unknown 1RM formula: {formula}")
    # overflowed inputs have no meaningful estimate
    return round(estimate) if math.isfinite(estimate) else 0


def comparison_value(
    set_record: Union[StrengthSet, CardioSet],
    metric_type: MetricType,
    formula: OneRMFormula = "epley",
) -> float:
    """
    The number sets of one exercise are ranked by.

    Cardio compares distance (km), bodyweight sets compare reps and loaded
    sets compare estimated 1RM. A set of the wrong variant for the
    exercise's metric type compares as 0.
    """
    if metric_type == MetricType.CARDIO:
        if isinstance(set_record, CardioSet):
            return set_record.distance_km
        return 0.0

    if not isinstance(set_record, StrengthSet):
        return 0.0
    if set_record.is_bodyweight:
        return float(set_record.reps)
    return float(estimated_1rm(set_record.weight_kg, set_record.reps, formula))


def parse_time_to_minutes(text: Optional[str]) -> float:
    """
    Parse a logged duration to minutes.

    ``MM:SS`` yields the minutes part, ``HH:MM:SS`` yields whole minutes and
    a plain number is taken as minutes. Anything else is 0.

    Examples:
        >>> parse_time_to_minutes("25:30")
        25.0
        >>> parse_time_to_minutes("1:05:00")
        65.0
        >>> parse_time_to_minutes("42.5")
        42.5
    """
    if not text:
        return 0.0
    text = str(text).strip()

    if ":" in text:
        try:
            parts = [float(p) for p in text.split(":")]
        except ValueError:
            return 0.0
        if len(parts) == 2:
            minutes = parts[0]
        elif len(parts) == 3:
            minutes = parts[0] * 60 + parts[1]
        else:
            return 0.0
        return minutes if math.isfinite(minutes) and minutes > 0 else 0.0

    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) and value > 0 else 0.0


def cardio_distance_km(set_record: Union[StrengthSet, CardioSet]) -> float:
    if isinstance(set_record, CardioSet):
        return set_record.distance_km
    return 0.0


def cardio_minutes(set_record: Union[StrengthSet, CardioSet]) -> float:
    """Duration of a cardio set; a time-only set logs its minutes as distance."""
    if not isinstance(set_record, CardioSet):
        return 0.0
    minutes = parse_time_to_minutes(set_record.time)
    if not minutes and set_record.unit == "min":
        return set_record.distance
    return minutes
