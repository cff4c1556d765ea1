"""
Exercise catalog definitions.

An ExerciseDefinition is the canonical identity an exercise name resolves to.
Definitions are owned by the catalog and never mutated once loaded.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class MetricType(str, Enum):
    """How performance on an exercise is measured."""
    STRENGTH = "strength"
    CARDIO = "cardio"


class ExerciseDefinition(BaseModel):
    """
    Canonical exercise definition.

    Examples:
        >>> bench = ExerciseDefinition(
        ...     id="bench_press_barbell",
        ...     display_names={"en": "Barbell Bench Press", "es": "Press Banca (Barra)"},
        ...     category="Chest",
        ... )
        >>> bench.name_for("es")
        'Press Banca (Barra)'
    """

    id: str = Field(..., min_length=1, description="Canonical, immutable identifier")
    display_names: Dict[str, str] = Field(
        default_factory=dict,
        description="Localized display names keyed by locale (e.g. 'en', 'es')",
    )
    category: str = Field(default="General", description="Muscle group / catalog category")
    metric_type: MetricType = Field(default=MetricType.STRENGTH)
    bodyweight: bool = Field(
        default=False,
        description="True for inherently bodyweight movements (pull-ups, dips, push-ups)",
    )

    model_config = {"frozen": True}

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v or "General"

    @field_validator("metric_type", mode="before")
    @classmethod
    def default_metric_type(cls, v):
        return v or MetricType.STRENGTH

    @property
    def is_cardio(self) -> bool:
        return self.metric_type == MetricType.CARDIO

    def name_for(self, locale: str) -> Optional[str]:
        """Return the display name for a locale, or None if not translated."""
        return self.display_names.get(locale)

    @classmethod
    def from_record(cls, data: Dict) -> "ExerciseDefinition":
        """
        Build a definition from a catalog row.

        Accepts both the flat row shape used by the catalog table
        (``{"id", "en", "es", "category", "type"}``) and the model's own
        field names.
        """
        display_names = dict(data.get("display_names") or {})
        for locale in ("en", "es"):
            if data.get(locale) and locale not in display_names:
                display_names[locale] = data[locale]

        return cls(
            id=data["id"],
            display_names=display_names,
            category=data.get("category"),
            metric_type=data.get("metric_type") or data.get("type"),
            bodyweight=bool(data.get("bodyweight", False)),
        )
