"""
LiftLog Data Models
Pydantic models for the exercise catalog, logged workouts and analysis results.
"""
import datetime
import time
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from enum import Enum, IntEnum


# ============================================================
# Enums
# ============================================================

class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    ABDOMINALS = "abdominals"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    TRAPS = "traps"
    LATS = "lats"
    MIDDLE_BACK = "middle back"
    LOWER_BACK = "lower back"
    ADDUCTORS = "adductors"
    ABDUCTORS = "abductors"
    NECK = "neck"


class TimePeriod(IntEnum):
    """Analysis window in days."""
    WEEK = 7
    FORTNIGHT = 14
    MONTH = 30


class HeatLevel(str, Enum):
    COLD = "cold"
    COOL = "cool"
    WARM = "warm"
    HOT = "hot"


# Default set for a freshly added exercise
DEFAULT_REPS = 10
DEFAULT_WEIGHT = 0.0


def _new_workout_id() -> int:
    return int(time.time() * 1000)


# ============================================================
# Catalog & Workout Documents
# ============================================================

class Exercise(BaseModel):
    """Reference catalog entry."""
    name: str = ""
    category: str = ""
    equipment: Optional[str] = None
    primary_muscles: list[str] = Field(default_factory=list, alias="primaryMuscles")
    secondary_muscles: list[str] = Field(default_factory=list, alias="secondaryMuscles")
    instructions: Optional[list[str]] = None

    class Config:
        populate_by_name = True

    @field_validator("name", "category", mode="before")
    @classmethod
    def _none_to_blank(cls, value):
        return "" if value is None else value

    @field_validator("primary_muscles", "secondary_muscles", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        # Catalog entries sometimes omit the muscle lists entirely
        return [] if value is None else value


class WorkoutSet(BaseModel):
    """One logged set. Weight is unit-agnostic."""
    reps: int = Field(0, ge=0)
    weight: float = Field(0.0, ge=0)


class WorkoutExercise(Exercise):
    """Snapshot of a catalog exercise plus the sets logged against it."""
    sets: list[WorkoutSet] = Field(default_factory=list)

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> "WorkoutExercise":
        """Copy a catalog entry by value and seed it with one default set."""
        return cls(
            **exercise.model_dump(exclude={"sets"}),
            sets=[WorkoutSet(reps=DEFAULT_REPS, weight=DEFAULT_WEIGHT)],
        )


class Workout(BaseModel):
    """A dated workout session."""
    id: int = Field(default_factory=_new_workout_id)
    date: datetime.date = Field(default_factory=datetime.date.today)
    exercises: list[WorkoutExercise] = Field(default_factory=list)


# ============================================================
# Analysis Results
# ============================================================

class MuscleGroupStat(BaseModel):
    """Engagement of one muscle group over an analysis window."""
    muscle_group: MuscleGroup
    engagement_count: float = 0.0
    last_worked_date: Optional[datetime.date] = None
    exercise_count: int = 0


class Suggestion(BaseModel):
    """Ranked exercises for an underworked muscle group."""
    muscle_group: MuscleGroup
    exercises: list[Exercise] = Field(default_factory=list)
    reason: str = ""


class HeatmapEntry(BaseModel):
    """Heatmap cell for one muscle group."""
    muscle_group: MuscleGroup
    engagement_count: float = 0.0
    intensity: float = 0.0
    level: HeatLevel = HeatLevel.COLD
    color: str = ""
    body_regions: list[str] = Field(default_factory=list)


# ============================================================
# API Request/Response Models
# ============================================================

class AddExerciseRequest(BaseModel):
    """Add a catalog exercise to a draft workout by name."""
    name: str


class UpdateSetRequest(BaseModel):
    """Edit the values of a set in a draft workout."""
    reps: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)


class WorkoutDayGroup(BaseModel):
    """Saved workouts that share a calendar date."""
    date: datetime.date
    workouts: list[Workout]


class AnalysisResponse(BaseModel):
    """Full muscle engagement analysis for one window."""
    time_period: TimePeriod
    has_data: bool
    stats: list[MuscleGroupStat]
    heatmap: list[HeatmapEntry]
    underworked: list[MuscleGroup]
    suggestions: list[Suggestion]
