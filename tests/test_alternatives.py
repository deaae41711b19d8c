"""Tests for alternative-choice extraction."""
import pytest

from workout_prefill_api.models import LoggedExercise
from workout_prefill_api.parsers.base import normalize_exercise_name
from workout_prefill_api.services.alternatives import (
    choose_alternative,
    excluded_names,
    exercise_for_option,
    extract_alternatives,
)


class TestExtractAlternatives:
    """Slash names and OR keywords."""

    def test_slash_alternatives(self):
        """'Pull-Ups/Chin-Ups 4x6' offers exactly two options with the shared scheme."""
        choice = extract_alternatives("Pull-Ups/Chin-Ups 4x6")

        assert choice is not None
        assert [o.exercise_name for o in choice.options] == ["Pull-Ups", "Chin-Ups"]
        assert all(o.sets == 4 and o.reps_lower_bound == 6 for o in choice.options)
        assert choice.combined_name == "Pull-Ups/Chin-Ups"
        assert choice.label == "Pull-Ups/Chin-Ups 4x6"

    def test_or_keyword(self):
        choice = extract_alternatives("Goblet Squat 3x10 OR Split Squat 3x8")
        assert [(o.exercise_name, o.sets, o.reps_lower_bound) for o in choice.options] == [
            ("Goblet Squat", 3, 10),
            ("Split Squat", 3, 8),
        ]
        assert choice.options[0].label == "Goblet Squat 3x10"

    def test_or_wins_over_slash(self):
        choice = extract_alternatives("Pull-Ups/Chin-Ups 4x6 or Inverted Row 3x10")
        assert [o.exercise_name for o in choice.options] == ["Pull-Ups/Chin-Ups", "Inverted Row"]
        assert choice.combined_name is None

    def test_at_most_three_options(self):
        choice = extract_alternatives("Row A 3x5 or Row B 3x5 or Row C 3x5 or Row D 3x5")
        assert len(choice.options) == 3

    def test_rep_range_lower_bound(self):
        choice = extract_alternatives("Dips/Push-Ups 3x8-12")
        assert [o.reps_lower_bound for o in choice.options] == [8, 8]

    def test_first_segment_with_choice_wins(self):
        text = "Back Squat 3x5 @ 75%; Pull-Ups/Chin-Ups 4x6; Goblet Squat 3x10 OR Split Squat 3x8"
        assert extract_alternatives(text).combined_name == "Pull-Ups/Chin-Ups"

    def test_labelled_slash_segment(self):
        choice = extract_alternatives("A1: Back Squat 3x5; A2: Pull-Ups/Chin-Ups 4x6")

        assert [o.exercise_name for o in choice.options] == ["Pull-Ups", "Chin-Ups"]
        assert choice.combined_name == "Pull-Ups/Chin-Ups"
        assert choice.label == "Pull-Ups/Chin-Ups 4x6"

    def test_labelled_or_segment(self):
        choice = extract_alternatives("Deadlift 3x5\nAccessory: Goblet Squat 3x10 OR Split Squat 3x8")
        assert [o.exercise_name for o in choice.options] == ["Goblet Squat", "Split Squat"]

    def test_list_marker_before_choice(self):
        choice = extract_alternatives("1. Back Squat 3x5\n2. Dips/Push-Ups 3x10")
        assert [o.exercise_name for o in choice.options] == ["Dips", "Push-Ups"]

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "Back Squat 3x5 @ 75%",
            "Squat 3x5 or something easy",
            "Rest 2/3 of the time",
        ],
    )
    def test_no_choice(self, text):
        assert extract_alternatives(text) is None


class TestExcludedNames:
    """Names kept out of the main prefill while a choice is pending."""

    def test_slash_excludes_options_and_combined(self):
        names = excluded_names(extract_alternatives("Pull-Ups/Chin-Ups 4x6"))
        assert names == {"pull ups", "chin ups", "pull ups/chin ups"}

    def test_hyphen_and_underscore_names_match(self):
        names = excluded_names(extract_alternatives("Pull-Ups/Chin-Ups 4x6"))
        assert normalize_exercise_name("pull_ups") in names
        assert normalize_exercise_name("Chin Ups") in names

    def test_none(self):
        assert excluded_names(None) == set()


class TestChooseAlternative:
    """Resolving a pending choice."""

    def test_appends_chosen_option(self):
        choice = extract_alternatives("Pull-Ups/Chin-Ups 4x6")
        existing = [LoggedExercise(id="ex-0-squat", name="Squat")]

        result = choose_alternative(existing, choice, 1)

        assert [e.name for e in result] == ["Squat", "Chin-Ups"]
        assert len(result[1].sets) == 4
        assert all(s.reps == 6 and s.weight == 0 for s in result[1].sets)
        assert len(existing) == 1

    @pytest.mark.parametrize("index", [-1, 2])
    def test_out_of_range(self, index):
        choice = extract_alternatives("Pull-Ups/Chin-Ups 4x6")
        with pytest.raises(IndexError):
            choose_alternative([], choice, index)

    def test_exercise_for_option_id(self):
        option = extract_alternatives("Pull-Ups/Chin-Ups 4x6").options[0]
        assert exercise_for_option(option, 3).id == "alt-3-pull-ups"
