"""
LiftLog Workout Analysis Module
Turns a workout history into per-muscle engagement, flags underworked
muscle groups and ranks catalog exercises to train them.
Pure logic - every function returns new data and never touches its inputs.
"""
import datetime
import logging
import math
from typing import Iterable, Optional

from models import (
    AnalysisResponse, Exercise, HeatLevel, HeatmapEntry, MuscleGroup,
    MuscleGroupStat, Suggestion, TimePeriod, Workout, WorkoutExercise,
)
from muscle_map import MAJOR_MUSCLE_GROUPS, classify_exercise, get_body_regions

logger = logging.getLogger(__name__)

# Volume (reps x weight) is divided by this to get an engagement weight
VOLUME_SCALE = 1000.0
# Engagement weight for exercises logged without any volume (bodyweight work)
FLAT_ENGAGEMENT_WEIGHT = 1.0
SECONDARY_FACTOR = 0.5

# Recency rule for "underworked", independent of the analysis window
UNDERWORKED_DAYS = 7

PRIMARY_PRIORITY = 2
SECONDARY_PRIORITY = 1

SUGGESTION_REASON = "You haven't worked your {group} in the last week. Try these exercises:"

# Engagement needed for (hot, warm) per window length
HEATMAP_THRESHOLDS: dict[TimePeriod, tuple[float, float]] = {
    TimePeriod.WEEK: (6, 2),
    TimePeriod.FORTNIGHT: (12, 4),
    TimePeriod.MONTH: (24, 8),
}

HEAT_COLORS: dict[HeatLevel, str] = {
    HeatLevel.HOT: "#ef4444",
    HeatLevel.WARM: "#f97316",
    HeatLevel.COOL: "#eab308",
    HeatLevel.COLD: "#3b82f6",
}


def _resolve_today(today: Optional[datetime.date]) -> datetime.date:
    return today if today is not None else datetime.date.today()


def window_cutoff(time_period: TimePeriod, today: Optional[datetime.date] = None) -> datetime.date:
    """Earliest date still inside the analysis window (inclusive)."""
    return _resolve_today(today) - datetime.timedelta(days=int(TimePeriod(time_period)))


# ============================================================
# Engagement Aggregation
# ============================================================

def engagement_weight(exercise: WorkoutExercise) -> float:
    """
    Training volume of a logged exercise, scaled down by VOLUME_SCALE.
    Falls back to a flat weight when nothing was lifted so bodyweight
    exercises still count.
    """
    volume = math.fsum(s.reps * s.weight for s in exercise.sets) / VOLUME_SCALE
    if volume == 0:
        return FLAT_ENGAGEMENT_WEIGHT
    return volume


def _touch(stat: MuscleGroupStat, workout_date: datetime.date) -> None:
    if stat.last_worked_date is None or workout_date > stat.last_worked_date:
        stat.last_worked_date = workout_date


def analyze_muscle_groups(
        workouts: Iterable[Workout],
        time_period: TimePeriod,
        today: Optional[datetime.date] = None,
) -> dict[MuscleGroup, MuscleGroupStat]:
    """
    Calculate muscle group engagement from a workout history.

    Every major muscle group gets an entry, worked or not. Workouts dated
    before the window cutoff are ignored; one dated exactly on the cutoff
    is included. Primary muscles receive the full engagement weight of an
    exercise and secondary muscles half of it.

    Contributions are summed with math.fsum once all workouts are seen, so
    the result does not depend on the order of `workouts`.
    """
    cutoff = window_cutoff(time_period, today)
    stats = {group: MuscleGroupStat(muscle_group=group) for group in MAJOR_MUSCLE_GROUPS}
    contributions: dict[MuscleGroup, list[float]] = {group: [] for group in stats}

    included = 0
    for workout in workouts:
        if workout.date < cutoff:
            continue
        included += 1

        for exercise in workout.exercises:
            classification = classify_exercise(exercise)
            weight = engagement_weight(exercise)
            touched: set[MuscleGroup] = set()

            for group, amount in (
                    [(g, weight) for g in classification.primary]
                    + [(g, weight * SECONDARY_FACTOR) for g in classification.secondary]
            ):
                stat = stats.get(group)
                if stat is None:
                    continue
                contributions[group].append(amount)
                _touch(stat, workout.date)
                if group not in touched:
                    stat.exercise_count += 1
                    touched.add(group)

    for group, amounts in contributions.items():
        stats[group].engagement_count = math.fsum(amounts)

    logger.debug("Analyzed %d workouts since %s", included, cutoff.isoformat())
    return stats


def has_analysis_data(
        workouts: Iterable[Workout],
        time_period: TimePeriod,
        today: Optional[datetime.date] = None,
) -> bool:
    """Whether any workout falls inside the analysis window."""
    cutoff = window_cutoff(time_period, today)
    return any(w.date >= cutoff for w in workouts)


# ============================================================
# Underworked Muscles
# ============================================================

def get_underworked_muscles(
        stats: dict[MuscleGroup, MuscleGroupStat],
        today: Optional[datetime.date] = None,
) -> list[MuscleGroup]:
    """Muscle groups not worked in the last UNDERWORKED_DAYS days."""
    cutoff = _resolve_today(today) - datetime.timedelta(days=UNDERWORKED_DAYS)
    return [
        group for group, stat in stats.items()
        if stat.last_worked_date is None or stat.last_worked_date < cutoff
    ]


# ============================================================
# Heatmap
# ============================================================

def get_heatmap_intensity(stat: MuscleGroupStat, time_period: TimePeriod) -> float:
    """
    Heatmap intensity (0.0 - 1.0) for a muscle group.
    Deliberately a step function: 1.0 hot, 0.6 warm, 0.3 worked, 0.0 untouched.
    """
    hot, warm = HEATMAP_THRESHOLDS[TimePeriod(time_period)]
    engagement = stat.engagement_count

    if engagement >= hot:
        return 1.0
    if engagement >= warm:
        return 0.6
    if engagement > 0:
        return 0.3
    return 0.0


def get_heat_level(intensity: float) -> HeatLevel:
    if intensity >= 0.8:
        return HeatLevel.HOT
    if intensity >= 0.5:
        return HeatLevel.WARM
    if intensity >= 0.2:
        return HeatLevel.COOL
    return HeatLevel.COLD


def build_heatmap(
        stats: dict[MuscleGroup, MuscleGroupStat],
        time_period: TimePeriod,
) -> list[HeatmapEntry]:
    entries = []
    for group, stat in stats.items():
        intensity = get_heatmap_intensity(stat, time_period)
        level = get_heat_level(intensity)
        entries.append(HeatmapEntry(
            muscle_group=group,
            engagement_count=stat.engagement_count,
            intensity=intensity,
            level=level,
            color=HEAT_COLORS[level],
            body_regions=get_body_regions(group),
        ))
    return entries


# ============================================================
# Suggestions
# ============================================================

def _suggestion_priority(exercise: Exercise, target: MuscleGroup) -> int:
    """Rank of an exercise for a target group, 0 if it does not train it."""
    classification = classify_exercise(exercise)
    if target in classification.primary:
        return PRIMARY_PRIORITY
    if target in classification.secondary:
        return SECONDARY_PRIORITY
    return 0


def generate_suggestions(
        underworked: Iterable[MuscleGroup],
        catalog: list[Exercise],
        limit_per_group: int = 5,
) -> list[Suggestion]:
    """
    Suggest catalog exercises for each underworked muscle group.

    Exercises that train the group as a primary muscle come before those
    that only train it as a secondary one; ties are broken by name.
    Groups with no matching exercise are left out.
    """
    suggestions = []

    for group in underworked:
        ranked = []
        for exercise in catalog:
            priority = _suggestion_priority(exercise, group)
            if priority:
                ranked.append((-priority, exercise.name, exercise))
        ranked.sort(key=lambda item: (item[0], item[1]))

        exercises: list[Exercise] = []
        seen: set[str] = set()
        for _, name, exercise in ranked:
            if len(exercises) >= limit_per_group:
                break
            if name in seen:
                continue
            seen.add(name)
            exercises.append(exercise)

        if exercises:
            suggestions.append(Suggestion(
                muscle_group=group,
                exercises=exercises,
                reason=SUGGESTION_REASON.format(group=group.value),
            ))

    logger.debug("Generated suggestions for %d muscle groups", len(suggestions))
    return suggestions


# ============================================================
# Full Analysis
# ============================================================

def run_analysis(
        workouts: list[Workout],
        catalog: list[Exercise],
        time_period: TimePeriod,
        today: Optional[datetime.date] = None,
        limit_per_group: int = 5,
) -> AnalysisResponse:
    """Run every analysis stage for one window."""
    today = _resolve_today(today)
    time_period = TimePeriod(time_period)

    stats = analyze_muscle_groups(workouts, time_period, today)
    underworked = get_underworked_muscles(stats, today)
    suggestions = generate_suggestions(underworked, catalog, limit_per_group) if underworked else []

    return AnalysisResponse(
        time_period=time_period,
        has_data=has_analysis_data(workouts, time_period, today),
        stats=list(stats.values()),
        heatmap=build_heatmap(stats, time_period),
        underworked=underworked,
        suggestions=suggestions,
    )
