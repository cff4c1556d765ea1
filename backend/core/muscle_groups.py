"""
Coarse muscle-group buckets used for training focus breakdowns.

Buckets are derived from the canonical id with keyword rules, so they work
for ad-hoc ids that are not in the catalog. Rules are checked in order;
"press" alone lands in shoulders only after bench/chest presses were taken
by push.
"""
from enum import Enum
from typing import Dict, List, Tuple

from backend.core.normalize import normalize


class MuscleGroup(str, Enum):
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    OTHER = "other"


_RULES: Tuple[Tuple[MuscleGroup, Tuple[str, ...]], ...] = (
    (MuscleGroup.PUSH, ("bench", "push_up", "dip", "chest", "tricep", "press_banca", "fondos")),
    (MuscleGroup.PULL, ("pull", "row", "deadlift", "bicep", "curl", "dominada", "remo")),
    (MuscleGroup.LEGS, ("squat", "leg", "lunge", "calf", "sentadilla", "hip_thrust", "zancada")),
    (MuscleGroup.SHOULDERS, ("shoulder", "press", "raise", "hombro")),
)


def muscle_group(exercise_id: str) -> MuscleGroup:
    """
    Bucket an exercise id.

    Examples:
        >>> muscle_group("bench_press_barbell")
        <MuscleGroup.PUSH: 'push'>
        >>> muscle_group("Sentadilla bulgara")
        <MuscleGroup.LEGS: 'legs'>
    """
    key = normalize(exercise_id).replace(" ", "_").replace("-", "_")
    for group, keywords in _RULES:
        if any(keyword in key for keyword in keywords):
            return group
    return MuscleGroup.OTHER


def focus_breakdown(volume_by_group: Dict[MuscleGroup, float], top: int = 3) -> List[Tuple[MuscleGroup, int]]:
    """
    Share of total volume per group, largest first.

    Returns up to ``top`` (group, whole percent) pairs. Groups with no volume
    are left out; an empty or all-zero input gives an empty list.
    """
    total = sum(volume_by_group.values())
    if total <= 0:
        return []
    shares = [
        (group, round(volume / total * 100))
        for group, volume in volume_by_group.items()
        if volume > 0
    ]
    shares.sort(key=lambda item: item[1], reverse=True)
    return shares[:top]
