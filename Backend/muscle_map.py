"""
LiftLog Muscle Mapping Module
Maps free-text muscle names from exercise records to canonical muscle groups.
Pure logic - no external dependencies.
"""
from typing import NamedTuple, Optional

from models import Exercise, MuscleGroup


class MuscleClassification(NamedTuple):
    primary: list[MuscleGroup]
    secondary: list[MuscleGroup]


# Muscle groups tracked by the analysis (everything except neck)
MAJOR_MUSCLE_GROUPS: list[MuscleGroup] = [
    MuscleGroup.CHEST,
    MuscleGroup.BACK,
    MuscleGroup.SHOULDERS,
    MuscleGroup.BICEPS,
    MuscleGroup.TRICEPS,
    MuscleGroup.FOREARMS,
    MuscleGroup.ABDOMINALS,
    MuscleGroup.QUADRICEPS,
    MuscleGroup.HAMSTRINGS,
    MuscleGroup.GLUTES,
    MuscleGroup.CALVES,
    MuscleGroup.TRAPS,
    MuscleGroup.LATS,
    MuscleGroup.MIDDLE_BACK,
    MuscleGroup.LOWER_BACK,
    MuscleGroup.ADDUCTORS,
    MuscleGroup.ABDUCTORS,
]

# ============================================================
# Muscle Name -> Muscle Group Aliases
# Order matters: the substring fallback returns the first listed match
# ============================================================

MUSCLE_NAME_MAP: dict[str, MuscleGroup] = {
    # === CHEST ===
    "chest": MuscleGroup.CHEST,
    "pectorals": MuscleGroup.CHEST,
    "pecs": MuscleGroup.CHEST,

    # === BACK ===
    "back": MuscleGroup.BACK,
    "lats": MuscleGroup.LATS,
    "latissimus dorsi": MuscleGroup.LATS,
    "middle back": MuscleGroup.MIDDLE_BACK,
    "lower back": MuscleGroup.LOWER_BACK,
    "upper back": MuscleGroup.MIDDLE_BACK,

    # === SHOULDERS ===
    "shoulders": MuscleGroup.SHOULDERS,
    "shoulder": MuscleGroup.SHOULDERS,
    "deltoids": MuscleGroup.SHOULDERS,
    "delts": MuscleGroup.SHOULDERS,
    "anterior deltoid": MuscleGroup.SHOULDERS,
    "posterior deltoid": MuscleGroup.SHOULDERS,
    "lateral deltoid": MuscleGroup.SHOULDERS,

    # === ARMS ===
    "biceps": MuscleGroup.BICEPS,
    "bicep": MuscleGroup.BICEPS,
    "triceps": MuscleGroup.TRICEPS,
    "tricep": MuscleGroup.TRICEPS,
    "forearms": MuscleGroup.FOREARMS,
    "forearm": MuscleGroup.FOREARMS,

    # === CORE ===
    "abdominals": MuscleGroup.ABDOMINALS,
    "abs": MuscleGroup.ABDOMINALS,
    "abdominal": MuscleGroup.ABDOMINALS,
    "core": MuscleGroup.ABDOMINALS,

    # === LEGS ===
    "quadriceps": MuscleGroup.QUADRICEPS,
    "quads": MuscleGroup.QUADRICEPS,
    "quad": MuscleGroup.QUADRICEPS,
    "hamstrings": MuscleGroup.HAMSTRINGS,
    "hamstring": MuscleGroup.HAMSTRINGS,
    "hams": MuscleGroup.HAMSTRINGS,
    "glutes": MuscleGroup.GLUTES,
    "glute": MuscleGroup.GLUTES,
    "gluteal": MuscleGroup.GLUTES,
    "calves": MuscleGroup.CALVES,
    "calf": MuscleGroup.CALVES,
    "gastrocnemius": MuscleGroup.CALVES,
    "soleus": MuscleGroup.CALVES,

    # === OTHER ===
    "traps": MuscleGroup.TRAPS,
    "trapezius": MuscleGroup.TRAPS,
    "trap": MuscleGroup.TRAPS,
    "adductors": MuscleGroup.ADDUCTORS,
    "adductor": MuscleGroup.ADDUCTORS,
    "abductors": MuscleGroup.ABDUCTORS,
    "abductor": MuscleGroup.ABDUCTORS,
    "neck": MuscleGroup.NECK,
}

# ============================================================
# Muscle Group -> Body Diagram Regions
# Region names follow the front/back body diagram used by the heatmap
# ============================================================

BODY_REGION_MAP: dict[MuscleGroup, list[str]] = {
    MuscleGroup.CHEST: ["chest"],
    MuscleGroup.BACK: ["upper-back"],
    MuscleGroup.SHOULDERS: ["front-deltoids", "back-deltoids"],
    MuscleGroup.BICEPS: ["biceps"],
    MuscleGroup.TRICEPS: ["triceps"],
    MuscleGroup.FOREARMS: ["forearm"],
    MuscleGroup.ABDOMINALS: ["abs", "obliques"],
    MuscleGroup.QUADRICEPS: ["quadriceps"],
    MuscleGroup.HAMSTRINGS: ["hamstring"],
    MuscleGroup.GLUTES: ["gluteal"],
    MuscleGroup.CALVES: ["calves"],
    MuscleGroup.TRAPS: ["trapezius"],
    MuscleGroup.LATS: ["upper-back"],  # no separate lats region on the diagram
    MuscleGroup.MIDDLE_BACK: ["upper-back"],
    MuscleGroup.LOWER_BACK: ["lower-back"],
    MuscleGroup.ADDUCTORS: ["adductor"],
    MuscleGroup.ABDUCTORS: ["abductors"],
    MuscleGroup.NECK: ["neck"],
}


def normalize_muscle_name(name: str) -> Optional[MuscleGroup]:
    """
    Map a free-text muscle name to its muscle group.
    Returns None for names that match nothing, including blank input.
    """
    normalized = (name or "").strip().casefold()
    if not normalized:
        return None

    # Direct match
    if normalized in MUSCLE_NAME_MAP:
        return MUSCLE_NAME_MAP[normalized]

    # Fuzzy match - alias inside the name, or name inside an alias
    for key, group in MUSCLE_NAME_MAP.items():
        if normalized in key or key in normalized:
            return group

    return None


def _normalize_all(names: Optional[list[str]]) -> list[MuscleGroup]:
    groups = []
    for name in names or []:
        group = normalize_muscle_name(name)
        if group is not None:
            groups.append(group)
    return groups


def classify_exercise(exercise: Exercise) -> MuscleClassification:
    """
    Get the muscle groups an exercise trains.
    Unrecognised names are dropped; repeats in the source lists are kept.
    """
    return MuscleClassification(
        primary=_normalize_all(exercise.primary_muscles),
        secondary=_normalize_all(exercise.secondary_muscles),
    )


def get_body_regions(group: MuscleGroup) -> list[str]:
    """Body diagram regions to highlight for a muscle group."""
    return list(BODY_REGION_MAP.get(group, [group.value]))


def get_muscle_group_for_region(region: str) -> Optional[MuscleGroup]:
    """First muscle group drawn on a body diagram region."""
    for group, regions in BODY_REGION_MAP.items():
        if region in regions:
            return group
    return None
