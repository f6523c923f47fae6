import os
import sys
import datetime
import itertools
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import (
    Exercise, HeatLevel, MuscleGroup, MuscleGroupStat, TimePeriod,
    Workout, WorkoutExercise, WorkoutSet,
)
from muscle_map import MAJOR_MUSCLE_GROUPS
from workout_analysis import (
    HEAT_COLORS,
    analyze_muscle_groups,
    build_heatmap,
    engagement_weight,
    generate_suggestions,
    get_heat_level,
    get_heatmap_intensity,
    get_underworked_muscles,
    has_analysis_data,
    run_analysis,
)

TODAY = datetime.date(2024, 6, 15)


def logged(name, primary, secondary=(), sets=((10, 100.0),)):
    return WorkoutExercise(
        name=name,
        primaryMuscles=list(primary),
        secondaryMuscles=list(secondary),
        sets=[WorkoutSet(reps=r, weight=w) for r, w in sets],
    )


def workout(days_ago, *exercises, workout_id=None):
    return Workout(
        id=workout_id if workout_id is not None else 1000 + days_ago,
        date=TODAY - datetime.timedelta(days=days_ago),
        exercises=list(exercises),
    )


class EngagementWeightTestCase(unittest.TestCase):
    def test_volume(self) -> None:
        self.assertAlmostEqual(engagement_weight(logged("Bench", ["chest"])), 1.0)
        ex = logged("Bench", ["chest"], sets=[(10, 100.0), (5, 200.0)])
        self.assertAlmostEqual(engagement_weight(ex), 2.0)

    def test_flat_fallback(self) -> None:
        self.assertEqual(engagement_weight(logged("Pushups", ["chest"], sets=[(0, 0.0)])), 1.0)
        self.assertEqual(engagement_weight(logged("Pushups", ["chest"], sets=[(12, 0.0)])), 1.0)
        self.assertEqual(engagement_weight(logged("Pushups", ["chest"], sets=[])), 1.0)


class AnalyzeMuscleGroupsTestCase(unittest.TestCase):
    def test_empty_history(self) -> None:
        stats = analyze_muscle_groups([], TimePeriod.WEEK, today=TODAY)
        self.assertEqual(list(stats.keys()), MAJOR_MUSCLE_GROUPS)
        for group, stat in stats.items():
            self.assertEqual(stat.muscle_group, group)
            self.assertEqual(stat.engagement_count, 0)
            self.assertEqual(stat.exercise_count, 0)
            self.assertIsNone(stat.last_worked_date)

    def test_single_set(self) -> None:
        stats = analyze_muscle_groups(
            [workout(0, logged("Bench Press", ["chest"]))], TimePeriod.WEEK, today=TODAY
        )
        chest = stats[MuscleGroup.CHEST]
        self.assertAlmostEqual(chest.engagement_count, 1.0)
        self.assertEqual(chest.exercise_count, 1)
        self.assertEqual(chest.last_worked_date, TODAY)

    def test_zero_set_uses_flat_weight(self) -> None:
        stats = analyze_muscle_groups(
            [workout(0, logged("Bench Press", ["chest"], sets=[(0, 0.0)]))],
            TimePeriod.WEEK, today=TODAY,
        )
        self.assertAlmostEqual(stats[MuscleGroup.CHEST].engagement_count, 1.0)

    def test_secondary_gets_half(self) -> None:
        stats = analyze_muscle_groups(
            [workout(0, logged("Bench Press", ["chest"], ["triceps"], sets=[(10, 200.0)]))],
            TimePeriod.WEEK, today=TODAY,
        )
        self.assertAlmostEqual(stats[MuscleGroup.CHEST].engagement_count, 2.0)
        self.assertAlmostEqual(stats[MuscleGroup.TRICEPS].engagement_count, 1.0)
        self.assertEqual(stats[MuscleGroup.TRICEPS].exercise_count, 1)
        self.assertEqual(stats[MuscleGroup.TRICEPS].last_worked_date, TODAY)

    def test_always_seventeen_groups(self) -> None:
        history = [workout(0, logged("Neck Bridge", ["neck"], ["traps"]))]
        for period in TimePeriod:
            stats = analyze_muscle_groups(history, period, today=TODAY)
            self.assertEqual(len(stats), 17)
            self.assertNotIn(MuscleGroup.NECK, stats)
        self.assertAlmostEqual(stats[MuscleGroup.TRAPS].engagement_count, 0.5)

    def test_window_cutoff_is_inclusive(self) -> None:
        on_cutoff = workout(7, logged("Curl", ["biceps"]))
        before_cutoff = workout(8, logged("Squat", ["quadriceps"]))
        stats = analyze_muscle_groups([on_cutoff, before_cutoff], TimePeriod.WEEK, today=TODAY)
        self.assertAlmostEqual(stats[MuscleGroup.BICEPS].engagement_count, 1.0)
        self.assertEqual(stats[MuscleGroup.QUADRICEPS].engagement_count, 0)
        self.assertIsNone(stats[MuscleGroup.QUADRICEPS].last_worked_date)

        stats = analyze_muscle_groups([on_cutoff, before_cutoff], TimePeriod.FORTNIGHT, today=TODAY)
        self.assertAlmostEqual(stats[MuscleGroup.QUADRICEPS].engagement_count, 1.0)

    def test_muscle_in_both_lists_counts_one_exercise(self) -> None:
        ex = logged("Fly", ["chest"], ["chest", "pecs"], sets=[])
        stats = analyze_muscle_groups([workout(0, ex)], TimePeriod.WEEK, today=TODAY)
        chest = stats[MuscleGroup.CHEST]
        self.assertAlmostEqual(chest.engagement_count, 2.0)
        self.assertEqual(chest.exercise_count, 1)

    def test_exercise_count_across_workouts(self) -> None:
        history = [
            workout(1, logged("Bench", ["chest"]), logged("Pushups", ["chest"], sets=[])),
            workout(3, logged("Dips", ["triceps"], ["chest"], sets=[])),
        ]
        stats = analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        self.assertEqual(stats[MuscleGroup.CHEST].exercise_count, 3)
        self.assertAlmostEqual(stats[MuscleGroup.CHEST].engagement_count, 2.5)

    def test_last_worked_is_latest(self) -> None:
        history = [
            workout(2, logged("Bench", ["chest"])),
            workout(5, logged("Bench", ["chest"])),
            workout(1, logged("Dips", ["triceps"], ["chest"])),
        ]
        stats = analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        self.assertEqual(
            stats[MuscleGroup.CHEST].last_worked_date, TODAY - datetime.timedelta(days=1)
        )

    def test_order_independent_and_idempotent(self) -> None:
        history = [
            workout(1, logged("Bench", ["chest"], ["triceps"], sets=[(8, 80.0)])),
            workout(4, logged("Squat", ["quads"], ["glutes", "hamstrings"], sets=[(5, 140.0)])),
            workout(6, logged("Row", ["middle back"], ["biceps", "lats"], sets=[])),
        ]
        forward = analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        again = analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        backward = analyze_muscle_groups(list(reversed(history)), TimePeriod.WEEK, today=TODAY)
        self.assertEqual(forward, again)
        self.assertEqual(forward, backward)

    def test_float_totals_do_not_depend_on_order(self) -> None:
        # volumes 0.1, 0.2 and 0.3 round differently when added left to right
        history = [
            workout(0, logged("Bench", ["chest"], sets=[(1, weight)]), workout_id=i)
            for i, weight in enumerate([100.0, 200.0, 300.0])
        ]
        expected = analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        for ordering in itertools.permutations(history):
            self.assertEqual(
                analyze_muscle_groups(list(ordering), TimePeriod.WEEK, today=TODAY), expected
            )
        self.assertAlmostEqual(expected[MuscleGroup.CHEST].engagement_count, 0.6)
        self.assertEqual(expected[MuscleGroup.CHEST].exercise_count, 3)

    def test_does_not_modify_input(self) -> None:
        history = [workout(0, logged("Bench", ["chest"], ["triceps"]))]
        before = [w.model_dump() for w in history]
        analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        self.assertEqual([w.model_dump() for w in history], before)

    def test_engagement_never_decreases(self) -> None:
        history = [workout(1, logged("Bench", ["chest"]))]
        first = analyze_muscle_groups(history, TimePeriod.MONTH, today=TODAY)
        history.append(workout(2, logged("Pushups", ["chest"], ["shoulders"], sets=[])))
        second = analyze_muscle_groups(history, TimePeriod.MONTH, today=TODAY)
        for group in MAJOR_MUSCLE_GROUPS:
            self.assertGreaterEqual(second[group].engagement_count, first[group].engagement_count)
            self.assertGreaterEqual(second[group].exercise_count, first[group].exercise_count)

    def test_invalid_period(self) -> None:
        with self.assertRaises(ValueError):
            analyze_muscle_groups([], 10, today=TODAY)

    def test_has_analysis_data(self) -> None:
        self.assertFalse(has_analysis_data([], TimePeriod.WEEK, today=TODAY))
        history = [workout(10, logged("Bench", ["chest"]))]
        self.assertFalse(has_analysis_data(history, TimePeriod.WEEK, today=TODAY))
        self.assertTrue(has_analysis_data(history, TimePeriod.FORTNIGHT, today=TODAY))


class UnderworkedTestCase(unittest.TestCase):
    def test_empty_history_all_underworked(self) -> None:
        stats = analyze_muscle_groups([], TimePeriod.WEEK, today=TODAY)
        self.assertEqual(get_underworked_muscles(stats, today=TODAY), MAJOR_MUSCLE_GROUPS)

    def test_seven_day_rule(self) -> None:
        stats = {
            MuscleGroup.CHEST: MuscleGroupStat(
                muscle_group=MuscleGroup.CHEST, engagement_count=1,
                last_worked_date=TODAY - datetime.timedelta(days=7),
            ),
            MuscleGroup.BACK: MuscleGroupStat(
                muscle_group=MuscleGroup.BACK, engagement_count=1,
                last_worked_date=TODAY - datetime.timedelta(days=8),
            ),
            MuscleGroup.LATS: MuscleGroupStat(muscle_group=MuscleGroup.LATS),
            MuscleGroup.BICEPS: MuscleGroupStat(
                muscle_group=MuscleGroup.BICEPS, engagement_count=1, last_worked_date=TODAY,
            ),
        }
        self.assertEqual(
            get_underworked_muscles(stats, today=TODAY), [MuscleGroup.BACK, MuscleGroup.LATS]
        )

    def test_independent_of_analysis_window(self) -> None:
        history = [workout(20, logged("Bench", ["chest"]))]
        stats = analyze_muscle_groups(history, TimePeriod.MONTH, today=TODAY)
        self.assertIn(MuscleGroup.CHEST, get_underworked_muscles(stats, today=TODAY))


class HeatmapTestCase(unittest.TestCase):
    def stat(self, engagement):
        return MuscleGroupStat(muscle_group=MuscleGroup.CHEST, engagement_count=engagement)

    def test_week_thresholds(self) -> None:
        self.assertEqual(get_heatmap_intensity(self.stat(6), TimePeriod.WEEK), 1.0)
        self.assertEqual(get_heatmap_intensity(self.stat(5.99), TimePeriod.WEEK), 0.6)
        self.assertEqual(get_heatmap_intensity(self.stat(2), TimePeriod.WEEK), 0.6)
        self.assertEqual(get_heatmap_intensity(self.stat(1.99), TimePeriod.WEEK), 0.3)
        self.assertEqual(get_heatmap_intensity(self.stat(0.5), TimePeriod.WEEK), 0.3)
        self.assertEqual(get_heatmap_intensity(self.stat(0), TimePeriod.WEEK), 0.0)

    def test_thresholds_scale_with_window(self) -> None:
        self.assertEqual(get_heatmap_intensity(self.stat(6), TimePeriod.FORTNIGHT), 0.6)
        self.assertEqual(get_heatmap_intensity(self.stat(12), TimePeriod.FORTNIGHT), 1.0)
        self.assertEqual(get_heatmap_intensity(self.stat(4), TimePeriod.FORTNIGHT), 0.6)
        self.assertEqual(get_heatmap_intensity(self.stat(12), TimePeriod.MONTH), 0.6)
        self.assertEqual(get_heatmap_intensity(self.stat(24), TimePeriod.MONTH), 1.0)
        self.assertEqual(get_heatmap_intensity(self.stat(7.5), TimePeriod.MONTH), 0.3)

    def test_levels(self) -> None:
        self.assertEqual(get_heat_level(1.0), HeatLevel.HOT)
        self.assertEqual(get_heat_level(0.8), HeatLevel.HOT)
        self.assertEqual(get_heat_level(0.6), HeatLevel.WARM)
        self.assertEqual(get_heat_level(0.5), HeatLevel.WARM)
        self.assertEqual(get_heat_level(0.3), HeatLevel.COOL)
        self.assertEqual(get_heat_level(0.2), HeatLevel.COOL)
        self.assertEqual(get_heat_level(0.0), HeatLevel.COLD)

    def test_build_heatmap(self) -> None:
        history = [workout(0, logged("Bench", ["chest"], ["shoulders"], sets=[(10, 600.0)]))]
        stats = analyze_muscle_groups(history, TimePeriod.WEEK, today=TODAY)
        cells = {c.muscle_group: c for c in build_heatmap(stats, TimePeriod.WEEK)}
        self.assertEqual(len(cells), 17)
        self.assertEqual(cells[MuscleGroup.CHEST].level, HeatLevel.HOT)
        self.assertEqual(cells[MuscleGroup.CHEST].color, HEAT_COLORS[HeatLevel.HOT])
        self.assertEqual(cells[MuscleGroup.SHOULDERS].level, HeatLevel.WARM)
        self.assertEqual(
            cells[MuscleGroup.SHOULDERS].body_regions, ["front-deltoids", "back-deltoids"]
        )
        self.assertEqual(cells[MuscleGroup.CALVES].level, HeatLevel.COLD)


class SuggestionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = [
            Exercise(name="Dips", primaryMuscles=["triceps"], secondaryMuscles=["chest"]),
            Exercise(name="Bench Press", primaryMuscles=["chest"], secondaryMuscles=["triceps"]),
            Exercise(name="Cable Fly", primaryMuscles=["pectorals"]),
            Exercise(name="Squat", primaryMuscles=["quadriceps"]),
            Exercise(name="Mystery", primaryMuscles=None, secondaryMuscles=None),
        ]

    def test_round_trip(self) -> None:
        catalog = [Exercise(name="Bench Press", primaryMuscles=["chest"], secondaryMuscles=["triceps"])]
        stats = analyze_muscle_groups([], TimePeriod.WEEK, today=TODAY)
        self.assertEqual(stats[MuscleGroup.CHEST].engagement_count, 0)
        underworked = get_underworked_muscles(stats, today=TODAY)
        self.assertIn(MuscleGroup.CHEST, underworked)

        suggestions = generate_suggestions([MuscleGroup.CHEST], catalog, 5)
        self.assertEqual(len(suggestions), 1)
        self.assertEqual(suggestions[0].muscle_group, MuscleGroup.CHEST)
        self.assertEqual([e.name for e in suggestions[0].exercises], ["Bench Press"])

    def test_primary_before_secondary_then_name(self) -> None:
        suggestions = generate_suggestions([MuscleGroup.CHEST], self.catalog, 5)
        self.assertEqual(
            [e.name for e in suggestions[0].exercises], ["Bench Press", "Cable Fly", "Dips"]
        )

    def test_name_order_is_case_sensitive(self) -> None:
        catalog = [
            Exercise(name="bench press", primaryMuscles=["chest"]),
            Exercise(name="Cable Fly", primaryMuscles=["chest"]),
        ]
        suggestions = generate_suggestions([MuscleGroup.CHEST], catalog, 5)
        self.assertEqual([e.name for e in suggestions[0].exercises], ["Cable Fly", "bench press"])

    def test_limit(self) -> None:
        suggestions = generate_suggestions([MuscleGroup.CHEST], self.catalog, 2)
        self.assertEqual([e.name for e in suggestions[0].exercises], ["Bench Press", "Cable Fly"])
        self.assertEqual(generate_suggestions([MuscleGroup.CHEST], self.catalog, 0), [])

    def test_target_order_and_skipped_groups(self) -> None:
        targets = [MuscleGroup.QUADRICEPS, MuscleGroup.CALVES, MuscleGroup.TRICEPS]
        suggestions = generate_suggestions(targets, self.catalog, 5)
        self.assertEqual(
            [s.muscle_group for s in suggestions], [MuscleGroup.QUADRICEPS, MuscleGroup.TRICEPS]
        )
        self.assertEqual([e.name for e in suggestions[1].exercises], ["Dips", "Bench Press"])

    def test_no_duplicates(self) -> None:
        catalog = self.catalog + [
            Exercise(name="Bench Press", primaryMuscles=["chest"]),
            Exercise(name="Dips", primaryMuscles=["chest"]),
        ]
        names = [e.name for e in generate_suggestions([MuscleGroup.CHEST], catalog, 5)[0].exercises]
        self.assertEqual(names, ["Bench Press", "Cable Fly", "Dips"])

    def test_empty_catalog(self) -> None:
        self.assertEqual(generate_suggestions(list(MAJOR_MUSCLE_GROUPS), [], 5), [])

    def test_reason(self) -> None:
        suggestion = generate_suggestions([MuscleGroup.MIDDLE_BACK], [
            Exercise(name="Row", primaryMuscles=["middle back"]),
        ], 5)[0]
        self.assertEqual(
            suggestion.reason,
            "You haven't worked your middle back in the last week. Try these exercises:",
        )

    def test_does_not_modify_catalog(self) -> None:
        before = [e.model_dump() for e in self.catalog]
        generate_suggestions([MuscleGroup.CHEST, MuscleGroup.TRICEPS], self.catalog, 5)
        self.assertEqual([e.model_dump() for e in self.catalog], before)
        self.assertFalse(hasattr(self.catalog[1], "_priority"))


class RunAnalysisTestCase(unittest.TestCase):
    def test_full_analysis(self) -> None:
        catalog = [
            Exercise(name="Bench Press", primaryMuscles=["chest"], secondaryMuscles=["triceps"]),
            Exercise(name="Barbell Curl", primaryMuscles=["biceps"]),
        ]
        history = [workout(2, logged("Bench Press", ["chest"], ["triceps"]))]
        result = run_analysis(history, catalog, TimePeriod.WEEK, today=TODAY)

        self.assertTrue(result.has_data)
        self.assertEqual(result.time_period, TimePeriod.WEEK)
        self.assertEqual(len(result.stats), 17)
        self.assertEqual(len(result.heatmap), 17)
        self.assertNotIn(MuscleGroup.CHEST, result.underworked)
        self.assertNotIn(MuscleGroup.TRICEPS, result.underworked)
        self.assertIn(MuscleGroup.BICEPS, result.underworked)
        self.assertEqual([s.muscle_group for s in result.suggestions], [MuscleGroup.BICEPS])

    def test_no_history(self) -> None:
        result = run_analysis([], [], TimePeriod.MONTH, today=TODAY)
        self.assertFalse(result.has_data)
        self.assertEqual(len(result.underworked), 17)
        self.assertEqual(result.suggestions, [])


if __name__ == "__main__":
    unittest.main()
