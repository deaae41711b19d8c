"""Tests for planned-workout summaries."""
from workout_prefill_api.parsers.models import PlannedWorkout
from workout_prefill_api.services.summary import (
    SEPARATOR,
    build_summary,
    swim_subtitle,
    workout_title,
)


class TestWorkoutTitle:
    """Discipline-specific titles."""

    def test_explicit_title_wins(self):
        workout = PlannedWorkout.from_any({"type": "ride", "workout_title": "Hill Repeats", "description": "VO2"})
        assert workout_title(workout) == "Hill Repeats"

    def test_ride_vo2(self):
        workout = PlannedWorkout.from_any({"type": "ride", "description": "VO2 max intervals"})
        assert workout_title(workout) == "Ride — VO2"

    def test_ride_long_ride_tag(self):
        workout = PlannedWorkout.from_any({"type": "bike", "tags": ["long_ride"]})
        assert workout_title(workout) == "Ride — Long Ride"

    def test_run_tempo(self):
        workout = PlannedWorkout.from_any({"type": "run", "description": "Tempo run"})
        assert workout_title(workout) == "Run — Tempo"

    def test_swim_technique_tag(self):
        workout = PlannedWorkout.from_any({"type": "swim", "tags": ["opt_kind:technique"]})
        assert workout_title(workout) == "Swim — Technique"

    def test_strength_uses_name(self):
        assert workout_title(PlannedWorkout.from_any({"type": "strength", "name": "Upper A"})) == "Upper A"

    def test_fallback(self):
        assert workout_title(PlannedWorkout.from_any({})) == "Session"


class TestSwimSubtitle:
    """Compact swim descriptions in authored units."""

    def test_full_session(self, swim_planned):
        subtitle = swim_subtitle(swim_planned["steps_preset"])
        assert subtitle == "WU 400 yd • Drills: catchup 4x50 @ :15r • Pull 4x100 @ :20r • CD 200 yd"

    def test_duplicates_collapsed(self):
        subtitle = swim_subtitle(["swim_kick_4x50yd", "swim_kick_4x50yd"])
        assert subtitle == "Kick 4x50"

    def test_no_swim_tokens(self):
        assert swim_subtitle(["strength_squat_3x5"]) is None


class TestBuildSummary:
    """End-to-end summaries."""

    def test_swim(self, swim_planned):
        summary = build_summary(swim_planned)

        assert summary.title == "Swim — Technique"
        assert summary.swim_yards == 1200
        assert summary.subtitle.startswith("WU 400 yd")
        assert summary.minutes is None

    def test_swim_minutes_from_baseline_pace(self, swim_planned, baselines):
        summary = build_summary(swim_planned, baselines)
        # 1200 yd at 1:45/100yd plus 3*15 s and 3*20 s rest
        assert summary.minutes == 23

    def test_ride_power_lines(self):
        workout = {"type": "ride", "description": "VO2", "steps_preset": ["bike_vo2_5x3min_r3min"]}
        summary = build_summary(workout, {"ftp": 250})

        assert summary.lines == ["5 × 3 min @ 248–303 W with 3:00 easy"]
        assert summary.minutes == 27
        assert summary.swim_yards is None

    def test_tempo_pace_line(self):
        workout = {"type": "run", "description": "Tempo run", "steps_preset": ["tempo_4mi_5kpace_plus0:45"]}
        summary = build_summary(workout, {"fiveK_pace": "7:00/mi"})

        assert summary.title == "Run — Tempo"
        assert summary.lines == ["Tempo 4 mi @ 7:45/mi (7:26–8:04/mi)"]

    def test_export_hints_argument_overrides_workout(self):
        workout = {
            "type": "run",
            "steps_preset": ["tempo_4mi_5kpace"],
            "export_hints": {"pace_tolerance_quality": 0.2},
        }
        summary = build_summary(workout, {"fiveK_pace": "8:00/mi"}, {"pace_tolerance_quality": 0.1})
        assert summary.lines == ["Tempo 4 mi @ 8:00/mi (7:12–8:48/mi)"]

    def test_strength_lines(self, strength_planned, baselines):
        summary = build_summary(strength_planned, baselines)

        assert summary.title == "Upper A"
        assert "Bench Press 5×5 @ 140 lb" in summary.lines
        assert "Barbell Row 4×8 @ 135 lb" in summary.lines
        assert summary.friendly_summary == SEPARATOR.join(summary.lines)

    def test_percent_without_baseline(self):
        summary = build_summary({"type": "strength", "steps_preset": ["strength_squat_3x5_75pct"]})
        assert summary.lines == ["Squat 3×5 @ 75%"]

    def test_empty(self):
        summary = build_summary({})
        assert summary.title == "Session"
        assert summary.minutes is None
        assert summary.subtitle is None
        assert summary.lines == []

    def test_text_only_subtitle(self):
        summary = build_summary({"type": "run", "description": "Easy 30 min"})
        assert summary.subtitle == "Easy 30 min"
        assert summary.minutes == 30
