"""
Workout aggregate and exercise entries.

A Workout owns its ExerciseEntry list, which owns its sets. Entry names are
kept exactly as typed or transcribed; resolving them to a canonical exercise
happens fresh on every computation and is never stored on the entry.
"""

import json
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.models.exercise import MetricType
from domain.models.sets import CARDIO_UNITS, CardioSet, SetRecord, StrengthSet

logger = logging.getLogger(__name__)

_SET_KINDS = {m.value for m in MetricType}


def _infer_kind(raw: Dict[str, Any], metric_type: Optional[str]) -> str:
    """Pick the set variant for a raw set dict."""
    if isinstance(metric_type, str) and metric_type in _SET_KINDS:
        return metric_type
    if raw.get("distance") is not None or raw.get("time") is not None:
        return MetricType.CARDIO.value
    if str(raw.get("unit") or "").strip().lower() in CARDIO_UNITS:
        return MetricType.CARDIO.value
    return MetricType.STRENGTH.value


def _tag_set(raw: Any, metric_type: Optional[str]) -> Any:
    if isinstance(raw, (StrengthSet, CardioSet)):
        return raw
    kind = raw.get("kind")
    if isinstance(kind, str) and kind in _SET_KINDS:
        return raw
    return {**raw, "kind": _infer_kind(raw, metric_type)}


class ExerciseEntry(BaseModel):
    """
    One exercise as performed in a workout.

    Raw set dicts are tagged as strength or cardio on construction: by the
    entry's ``type`` when present, otherwise from the fields they carry.

    Examples:
        >>> entry = ExerciseEntry(name="press banca", sets=[{"reps": 10, "weight": 80}])
        >>> entry.sets[0].kind
        'strength'
        >>> ExerciseEntry(name="Correr", sets=[{"distance": 5, "unit": "km"}]).sets[0].kind
        'cardio'
    """

    name: str = Field(default="", description="Exercise name as typed or transcribed")
    sets: List[SetRecord] = Field(default_factory=list)
    unilateral: bool = Field(
        default=False,
        description="True when the logged weight is per side and the real load is double",
    )
    type: Optional[MetricType] = Field(
        default=None, description="Metric type reported by the producer, if any"
    )

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def tag_sets(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        metric_type = data.get("type")
        if isinstance(metric_type, MetricType):
            metric_type = metric_type.value
        if not isinstance(metric_type, str) or metric_type not in _SET_KINDS:
            metric_type = None
        data["type"] = metric_type

        data["name"] = str(data.get("name") or "")
        data["unilateral"] = bool(data.get("unilateral"))

        raw_sets = data.get("sets")
        if not isinstance(raw_sets, (list, tuple)):
            raw_sets = []
        data["sets"] = [
            _tag_set(s, metric_type)
            for s in raw_sets
            if isinstance(s, (dict, StrengthSet, CardioSet))
        ]
        return data

    @classmethod
    def from_raw(
        cls, data: Dict[str, Any], metric_type: Optional[MetricType] = None
    ) -> "ExerciseEntry":
        """
        Build an entry from producer output, tagging every set by ``metric_type``.

        Use this when the catalog already knows the exercise's metric type;
        it overrides whatever the producer guessed.
        """
        if metric_type is None:
            return cls.model_validate(data)

        payload = dict(data)
        payload["type"] = metric_type.value
        raw_sets = payload.get("sets")
        if isinstance(raw_sets, (list, tuple)):
            payload["sets"] = [
                {k: v for k, v in s.items() if k != "kind"} if isinstance(s, dict) else s
                for s in raw_sets
            ]
        return cls.model_validate(payload)


class Workout(BaseModel):
    """
    A logged workout. Immutable; edits replace the whole workout.

    ``body_weight_at_time`` is the athlete's weight on the day of the
    workout. Bodyweight volume uses it in preference to the current profile
    weight.

    The storage row shape (``structured_data`` holding the exercises,
    ``user_weight`` holding the body weight) is accepted as well.
    """

    id: str = ""
    user_id: str = ""
    date: date
    exercises: List[ExerciseEntry] = Field(default_factory=list)
    body_weight_at_time: Optional[float] = Field(default=None, gt=0)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def accept_storage_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if "exercises" not in data and "structured_data" in data:
            structured = data.pop("structured_data")
            if isinstance(structured, str):
                try:
                    structured = json.loads(structured)
                except json.JSONDecodeError as e:
                    logger.warning(f"Unparseable structured_data on workout {data.get('id')}: {e}")
                    structured = {}
            if not isinstance(structured, dict):
                structured = {}
            data["exercises"] = structured.get("exercises") or []

        if "body_weight_at_time" not in data and "user_weight" in data:
            data["body_weight_at_time"] = data.pop("user_weight")

        if not isinstance(data.get("exercises"), (list, tuple)):
            data["exercises"] = []
        return data

    @field_validator("date", mode="before")
    @classmethod
    def to_calendar_day(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            return date.fromisoformat(v.strip()[:10])
        return v

    @field_validator("body_weight_at_time", mode="before")
    @classmethod
    def drop_missing_weight(cls, v: Any) -> Optional[float]:
        try:
            value = float(v)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) and value > 0 else None

    def effective_body_weight(self, current_body_weight: float) -> float:
        """Body weight for this workout, falling back to the current profile weight."""
        if self.body_weight_at_time is not None:
            return self.body_weight_at_time
        return current_body_weight
