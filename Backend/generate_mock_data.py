"""
LiftLog Mock Data Generator
Build a random but reproducible workout history from the exercise catalog.
"""
import argparse
import datetime
import json
import logging
import random
import sys
from typing import Optional

from config import settings
from catalog import load_catalog
from models import Exercise, Workout, WorkoutExercise, WorkoutSet

logger = logging.getLogger(__name__)

# Configuration
NUM_WORKOUTS = 12
DAYS_BACK = 30
EXERCISES_PER_WORKOUT = (3, 6)
SETS_PER_EXERCISE = (2, 4)
REP_RANGE = (5, 15)
WEIGHT_RANGE = (0, 120)


def generate_exercise(exercise: Exercise, rng: random.Random) -> WorkoutExercise:
    """Log a catalog exercise with a few random sets."""
    logged = WorkoutExercise.from_exercise(exercise)
    bodyweight = exercise.equipment == "body only"
    logged.sets = [
        WorkoutSet(
            reps=rng.randint(*REP_RANGE),
            weight=0.0 if bodyweight else float(rng.randrange(WEIGHT_RANGE[0], WEIGHT_RANGE[1] + 1, 5)),
        )
        for _ in range(rng.randint(*SETS_PER_EXERCISE))
    ]
    return logged


def generate_workouts(
        catalog: list[Exercise],
        num_workouts: int = NUM_WORKOUTS,
        days_back: int = DAYS_BACK,
        seed: Optional[int] = None,
        today: Optional[datetime.date] = None,
) -> list[Workout]:
    """Random workouts dated within the last `days_back` days."""
    if not catalog:
        return []

    rng = random.Random(seed)
    today = today or datetime.date.today()
    base_id = int(datetime.datetime.combine(today, datetime.time()).timestamp() * 1000)

    workouts = []
    for i in range(num_workouts):
        date = today - datetime.timedelta(days=rng.randint(0, days_back))
        count = min(rng.randint(*EXERCISES_PER_WORKOUT), len(catalog))
        exercises = [generate_exercise(ex, rng) for ex in rng.sample(catalog, count)]
        workouts.append(Workout(id=base_id + i, date=date, exercises=exercises))

    workouts.sort(key=lambda w: w.date)
    return workouts


def main():
    parser = argparse.ArgumentParser(description="Generate mock LiftLog workout history")
    parser.add_argument("-o", "--output", help="Write workouts JSON here instead of stdout")
    parser.add_argument("-n", "--num-workouts", type=int, default=NUM_WORKOUTS)
    parser.add_argument("--days-back", type=int, default=DAYS_BACK)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--catalog", default=settings.EXERCISE_CATALOG_PATH)
    args = parser.parse_args()

    catalog = load_catalog(args.catalog, settings.EXCLUDED_CATEGORIES)
    workouts = generate_workouts(catalog, args.num_workouts, args.days_back, args.seed)
    payload = json.dumps(
        [w.model_dump(mode="json", by_alias=True) for w in workouts], indent=2
    )

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info("Wrote %d workouts to %s", len(workouts), args.output)
    else:
        sys.stdout.write(payload + "\n")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    main()
