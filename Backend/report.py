"""
LiftLog Analysis Report
Print muscle engagement, underworked muscles and suggestions for a
workout history file.
"""
import argparse
import datetime
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from config import settings
from catalog import CatalogError, load_catalog
from models import AnalysisResponse, TimePeriod, Workout
from workout_analysis import run_analysis

BAR_WIDTH = 30


def load_workouts(path: str) -> list[Workout]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return TypeAdapter(list[Workout]).validate_python(data)


def format_report(result: AnalysisResponse) -> str:
    """Render an analysis as plain text."""
    lines = []
    lines.append("=" * 70)
    lines.append(f"LiftLog Muscle Report: last {int(result.time_period)} days")
    lines.append("=" * 70)

    if not result.has_data:
        lines.append("No workouts in this period.")

    lines.append("\nMUSCLE ENGAGEMENT")
    top = max((s.engagement_count for s in result.stats), default=0) or 1
    for stat, cell in zip(result.stats, result.heatmap):
        bar = "█" * int(stat.engagement_count / top * BAR_WIDTH)
        last = stat.last_worked_date.isoformat() if stat.last_worked_date else "never"
        lines.append(
            f"   {stat.muscle_group.value:12} {bar:{BAR_WIDTH}} "
            f"{stat.engagement_count:6.2f}  {cell.level.value:4}  "
            f"{stat.exercise_count:3d} ex  last: {last}"
        )

    if result.underworked:
        lines.append("\nUNDERWORKED")
        lines.append("   " + ", ".join(g.value for g in result.underworked))
    else:
        lines.append("\nAll major muscle groups have been worked in the last week.")

    for suggestion in result.suggestions:
        lines.append(f"\n{suggestion.reason}")
        for i, exercise in enumerate(suggestion.exercises, 1):
            equipment = exercise.equipment or "N/A"
            lines.append(f"   {i}. {exercise.name} ({exercise.category} • {equipment})")

    return "\n".join(lines)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze a LiftLog workout history")
    parser.add_argument("workouts", help="Path to a workouts JSON file")
    parser.add_argument("--days", type=int, choices=[p.value for p in TimePeriod],
                        default=settings.DEFAULT_TIME_PERIOD)
    parser.add_argument("--catalog", default=settings.EXERCISE_CATALOG_PATH)
    parser.add_argument("--today", type=datetime.date.fromisoformat, default=None,
                        help="Analyze as of this date (YYYY-MM-DD)")
    parser.add_argument("--limit", type=int, default=settings.SUGGESTIONS_PER_GROUP)
    args = parser.parse_args(argv)

    if not Path(args.workouts).exists():
        print(f"Error: workouts file not found: {args.workouts}", file=sys.stderr)
        return 1

    try:
        catalog = load_catalog(args.catalog, settings.EXCLUDED_CATEGORIES)
        workouts = load_workouts(args.workouts)
    except (CatalogError, ValidationError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = run_analysis(workouts, catalog, TimePeriod(args.days), args.today, args.limit)
    print(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
