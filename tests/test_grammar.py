"""Tests for the token grammar table."""
import pytest
from unittest.mock import patch

from workout_prefill_api.parsers.grammar import (
    FAMILIES,
    RULES_BY_NAME,
    TOKEN_GRAMMAR,
    TokenRule,
    match_token,
    validate_grammar,
)
from workout_prefill_api.parsers.token_parser import TokenParser, rule_for


ALL_EXAMPLES = [(rule.name, example) for rule in TOKEN_GRAMMAR for example in rule.examples]


class TestGrammarTable:
    """The rule table is internally consistent."""

    def test_grammar_is_sound(self):
        """No example is shadowed by an earlier rule."""
        assert validate_grammar() == []

    def test_every_family_is_covered(self):
        assert set(FAMILIES) == {"strength", "swim", "run", "bike", "span"}

    def test_rule_names_unique(self):
        assert len(RULES_BY_NAME) == len(TOKEN_GRAMMAR)

    @pytest.mark.parametrize("rule_name,example", ALL_EXAMPLES)
    def test_example_matches_own_rule(self, rule_name, example):
        """Every documented example is claimed by the rule that documents it."""
        rule, m = match_token(example)
        assert rule is not None
        assert rule.name == rule_name
        assert m is not None

    @pytest.mark.parametrize("rule_name,example", ALL_EXAMPLES)
    def test_every_example_builds_a_step(self, rule_name, example):
        """Every rule has a builder producing at least one step."""
        assert len(TokenParser().parse_token(example)) >= 1

    def test_shadowed_rule_is_reported(self):
        """A rule placed after a broader one is flagged."""
        broad = TokenRule(name="anything_strength", family="strength", pattern=r"strength_.*", examples=("strength_x",))
        narrow = TokenRule(name="narrow", family="strength", pattern=r"strength_squat_3x5", examples=("strength_squat_3x5",))
        with patch("workout_prefill_api.parsers.grammar.TOKEN_GRAMMAR", (broad, narrow)):
            problems = validate_grammar()
        assert any("shadowed" in p and "narrow" in p for p in problems)

    def test_rule_without_examples_is_reported(self):
        rule = TokenRule(name="lonely", family="run", pattern=r"lonely_\d+", examples=())
        with patch("workout_prefill_api.parsers.grammar.TOKEN_GRAMMAR", (rule,)):
            assert validate_grammar() == ["lonely: no examples"]


class TestMatchToken:
    """First match wins, most specific first."""

    def test_percent_beats_plain_scheme(self):
        rule, _ = match_token("strength_squat_3x5_77pct")
        assert rule.name == "strength_percent"

    def test_absolute_beats_plain_scheme(self):
        rule, _ = match_token("strength_barbell_row_4x8_135lb")
        assert rule.name == "strength_absolute"

    def test_zone_set_beats_generic_bike_set(self):
        rule, _ = match_token("bike_thr_2x20min_r5min")
        assert rule.name == "bike_zone_set"

    def test_case_insensitive(self):
        rule, _ = match_token("  STRENGTH_SQUAT_3X5  ")
        assert rule.name == "strength_scheme"

    @pytest.mark.parametrize("token", ["", "   ", "foo_bar", "strength_", "swim_fly_fast", "bike_easy"])
    def test_unmatched(self, token):
        assert match_token(token) == (None, None)

    def test_rule_for(self):
        assert rule_for("strides_6x20s").name == "run_strides"
        assert rule_for("nope") is None

    def test_missing_builder_fails_fast(self):
        """A rule added without a builder is caught when the parser is created."""
        extra = TokenRule(name="row_erg", family="row", pattern=r"row_\d+m", examples=("row_2000m",))
        with patch("workout_prefill_api.parsers.token_parser.TOKEN_GRAMMAR", TOKEN_GRAMMAR + (extra,)):
            with pytest.raises(RuntimeError, match="row_erg"):
                TokenParser()
