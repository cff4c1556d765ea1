"""
Set records: one performed set of an exercise.

A set is either a StrengthSet or a CardioSet, discriminated by ``kind``.
Input usually comes from an external AI extraction step, so numeric fields
are coerced rather than validated strictly: missing or garbled values become
zero instead of raising.
"""

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


# Conversion constant
LBS_TO_KG = 0.453592

POUND_UNITS = ("lb", "lbs", "pounds")
CARDIO_UNITS = ("km", "m", "min")


def _coerce_non_negative(v) -> float:
    """Coerce loosely-typed numeric input to a non-negative float."""
    if v is None or isinstance(v, bool):
        return 0.0
    try:
        value = float(v)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


class StrengthSet(BaseModel):
    """
    A strength set.

    A set logged with ``weight == 0`` is a bodyweight set, not a zero-load set.

    Examples:
        >>> round(StrengthSet(reps=5, weight=220, unit="lbs").weight_kg, 2)
        99.79
        >>> StrengthSet(reps=12, weight=0).is_bodyweight
        True
    """

    kind: Literal["strength"] = "strength"
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)
    unit: Literal["kg", "lbs"] = "kg"
    rpe: Optional[float] = Field(default=None, ge=1, le=10)
    is_unilateral: bool = False

    model_config = {"frozen": True}

    @field_validator("reps", mode="before")
    @classmethod
    def coerce_reps(cls, v) -> int:
        return int(_coerce_non_negative(v))

    @field_validator("weight", mode="before")
    @classmethod
    def coerce_weight(cls, v) -> float:
        return _coerce_non_negative(v)

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v) -> str:
        unit = str(v or "").strip().lower()
        if unit in POUND_UNITS:
            return "lbs"
        return "kg"

    @field_validator("rpe", mode="before")
    @classmethod
    def coerce_rpe(cls, v) -> Optional[float]:
        value = _coerce_non_negative(v)
        if 1 <= value <= 10:
            return value
        return None

    @field_validator("is_unilateral", mode="before")
    @classmethod
    def coerce_unilateral(cls, v) -> bool:
        return bool(v)

    @property
    def is_bodyweight(self) -> bool:
        return self.weight == 0

    @property
    def weight_kg(self) -> float:
        """Logged weight converted to kilograms."""
        if self.unit == "lbs":
            return self.weight * LBS_TO_KG
        return self.weight


class CardioSet(BaseModel):
    """
    A cardio set. Distance and time are independent metrics.

    Examples:
        >>> CardioSet(distance=800, unit="m").distance_km
        0.8
    """

    kind: Literal["cardio"] = "cardio"
    distance: float = Field(default=0.0, ge=0)
    time: Optional[str] = Field(
        default=None, description="Duration as 'MM:SS', 'HH:MM:SS' or numeric minutes"
    )
    unit: Literal["km", "m", "min"] = "km"

    model_config = {"frozen": True}

    @field_validator("distance", mode="before")
    @classmethod
    def coerce_distance(cls, v) -> float:
        return _coerce_non_negative(v)

    @field_validator("time", mode="before")
    @classmethod
    def coerce_time(cls, v) -> Optional[str]:
        if v is None or isinstance(v, bool):
            return None
        text = str(v).strip()
        return text or None

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v) -> str:
        unit = str(v or "").strip().lower()
        if unit in CARDIO_UNITS:
            return unit
        return "km"

    @property
    def distance_km(self) -> float:
        """Distance in kilometers. Time-only sets (unit 'min') have no distance."""
        if self.unit == "m":
            return self.distance / 1000
        if self.unit == "min":
            return 0.0
        return self.distance


SetRecord = Annotated[Union[StrengthSet, CardioSet], Field(discriminator="kind")]
