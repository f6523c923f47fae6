"""
LiftLog Workout Log
Draft editing for workouts in progress and the in-memory workout history.
Draft helpers never modify the workout they are given; they return an
edited copy.
"""
import datetime
import logging
import threading
import time
from typing import Iterable, Optional

from models import DEFAULT_REPS, DEFAULT_WEIGHT, Exercise, Workout, WorkoutExercise, WorkoutSet

logger = logging.getLogger(__name__)


class WorkoutError(ValueError):
    """Base class for workout log errors."""


class EmptyWorkoutError(WorkoutError):
    """A workout without exercises cannot be saved."""


class WorkoutNotFoundError(WorkoutError):
    """No workout with the requested id."""


class DuplicateWorkoutError(WorkoutError):
    """A saved workout already uses this id."""


class InvalidSetIndexError(WorkoutError):
    """An exercise or set index does not exist in the workout."""


# ============================================================
# Draft Editing
# ============================================================

def start_new_workout(
        today: Optional[datetime.date] = None,
        workout_id: Optional[int] = None,
) -> Workout:
    """Empty workout dated today."""
    fields = {"date": today or datetime.date.today()}
    if workout_id is not None:
        fields["id"] = workout_id
    return Workout(**fields)


def _exercise_at(workout: Workout, exercise_index: int) -> WorkoutExercise:
    if not 0 <= exercise_index < len(workout.exercises):
        raise InvalidSetIndexError(f"No exercise at index {exercise_index}")
    return workout.exercises[exercise_index]


def _set_at(exercise: WorkoutExercise, set_index: int) -> WorkoutSet:
    if not 0 <= set_index < len(exercise.sets):
        raise InvalidSetIndexError(f"No set at index {set_index} for {exercise.name}")
    return exercise.sets[set_index]


def add_exercise(workout: Workout, exercise: Exercise) -> Workout:
    """Append a snapshot of a catalog exercise with one default set."""
    updated = workout.model_copy(deep=True)
    updated.exercises.append(WorkoutExercise.from_exercise(exercise))
    return updated


def remove_exercise(workout: Workout, exercise_index: int) -> Workout:
    updated = workout.model_copy(deep=True)
    _exercise_at(updated, exercise_index)
    del updated.exercises[exercise_index]
    return updated


def add_set(workout: Workout, exercise_index: int) -> Workout:
    """Append a copy of the exercise's last set (or a default set)."""
    updated = workout.model_copy(deep=True)
    exercise = _exercise_at(updated, exercise_index)
    if exercise.sets:
        new_set = exercise.sets[-1].model_copy()
    else:
        new_set = WorkoutSet(reps=DEFAULT_REPS, weight=DEFAULT_WEIGHT)
    exercise.sets.append(new_set)
    return updated


def update_set(
        workout: Workout,
        exercise_index: int,
        set_index: int,
        reps: Optional[int] = None,
        weight: Optional[float] = None,
) -> Workout:
    updated = workout.model_copy(deep=True)
    exercise = _exercise_at(updated, exercise_index)
    current = _set_at(exercise, set_index)
    exercise.sets[set_index] = WorkoutSet(
        reps=current.reps if reps is None else reps,
        weight=current.weight if weight is None else weight,
    )
    return updated


def remove_set(workout: Workout, exercise_index: int, set_index: int) -> Workout:
    updated = workout.model_copy(deep=True)
    exercise = _exercise_at(updated, exercise_index)
    _set_at(exercise, set_index)
    del exercise.sets[set_index]
    return updated


# ============================================================
# History
# ============================================================

def group_workouts_by_date(workouts: Iterable[Workout]) -> list[tuple[datetime.date, list[Workout]]]:
    """Workouts grouped per calendar date, most recent date first."""
    by_date: dict[datetime.date, list[Workout]] = {}
    for workout in workouts:
        by_date.setdefault(workout.date, []).append(workout)
    return sorted(by_date.items(), key=lambda item: item[0], reverse=True)


class WorkoutStore:
    """
    In-memory workout history plus open drafts.
    Callers get copies, so nothing they do changes stored workouts.
    """

    def __init__(self, workouts: Optional[Iterable[Workout]] = None):
        self._lock = threading.Lock()
        self._workouts: dict[int, Workout] = {}
        self._drafts: dict[int, Workout] = {}
        for workout in workouts or []:
            self.save(workout)

    # --- saved history ---

    def save(self, workout: Workout) -> Workout:
        """Commit a workout to the history."""
        if not workout.exercises:
            raise EmptyWorkoutError("Cannot save a workout with no exercises")
        stored = workout.model_copy(deep=True)
        with self._lock:
            if stored.id in self._workouts:
                raise DuplicateWorkoutError(f"Workout already saved: {stored.id}")
            self._workouts[stored.id] = stored
            self._drafts.pop(stored.id, None)
        logger.info("Saved workout %s (%d exercises)", stored.id, len(stored.exercises))
        return stored.model_copy(deep=True)

    def get(self, workout_id: int) -> Workout:
        with self._lock:
            workout = self._workouts.get(workout_id)
        if workout is None:
            raise WorkoutNotFoundError(f"Workout not found: {workout_id}")
        return workout.model_copy(deep=True)

    def delete(self, workout_id: int) -> None:
        with self._lock:
            if workout_id not in self._workouts:
                raise WorkoutNotFoundError(f"Workout not found: {workout_id}")
            del self._workouts[workout_id]
        logger.info("Deleted workout %s", workout_id)

    def all(self) -> list[Workout]:
        with self._lock:
            return [w.model_copy(deep=True) for w in self._workouts.values()]

    def clear(self) -> None:
        with self._lock:
            self._workouts.clear()
            self._drafts.clear()

    # --- drafts ---

    def next_id(self) -> int:
        """Creation timestamp in ms, bumped past any id already in use."""
        candidate = int(time.time() * 1000)
        with self._lock:
            taken = self._workouts.keys() | self._drafts.keys()
            while candidate in taken:
                candidate += 1
        return candidate

    def put_draft(self, workout: Workout) -> Workout:
        with self._lock:
            self._drafts[workout.id] = workout.model_copy(deep=True)
        return workout

    def get_draft(self, workout_id: int) -> Workout:
        with self._lock:
            draft = self._drafts.get(workout_id)
        if draft is None:
            raise WorkoutNotFoundError(f"Draft workout not found: {workout_id}")
        return draft.model_copy(deep=True)

    def commit_draft(self, workout_id: int) -> Workout:
        """Save a draft into the history."""
        return self.save(self.get_draft(workout_id))

    def discard_draft(self, workout_id: int) -> None:
        """Drop a draft without saving it."""
        with self._lock:
            if workout_id not in self._drafts:
                raise WorkoutNotFoundError(f"Draft workout not found: {workout_id}")
            del self._drafts[workout_id]
        logger.info("Discarded draft workout %s", workout_id)
