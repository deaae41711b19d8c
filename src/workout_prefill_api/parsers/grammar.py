"""
Token Grammar

The compact workout-token vocabulary, declared once as an ordered table of
rules. The token parser is generated from this table, so adding a token
family means adding a rule here (with an example) and a builder for it.

    strength_token := "strength_" exercise "_" sets "x" reps ["_" pct "pct" | "_" weight unit]
    swim_token     := "swim_" kind "_" ... dist unit ["_r" restsec]
    run_token      := interval | cruise | tempo | longrun | strides | speed
    bike_token     := "bike_" (ss|thr|vo2|<name>) "_" reps "x" minutes "min" ["_r" minutes "min"]
    span_token     := ("warmup" | "cooldown") ... minutes ["-" minutes] "min"

Rules are tried in table order, first match wins, most specific first.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple


# Shared grammar fragments
INT = r"\d+"
DECIMAL = r"\d+(?:\.\d+)?"
NAME = r"[a-z0-9_]+?"
SWIM_UNIT = r"(?P<unit>yd|m)"
SWIM_REST = r"(?:_r(?P<rest>\d+))?"
PACE_OFFSET = r"(?:_(?P<offset>plus\d+(?::\d{2})?s?))?"
TRAILER = r"(?:_.*)?"
SET_NOTES = r"(?:_(?!r\d)[a-z0-9]+)*"  # "_z3" between the set and its rest


@dataclass(frozen=True)
class TokenRule:
    """One production of the token grammar."""
    name: str
    family: str
    pattern: str
    examples: Tuple[str, ...]
    regex: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "regex", re.compile(rf"^{self.pattern}$", re.IGNORECASE))

    def match(self, token: str) -> Optional[re.Match]:
        return self.regex.match(token)


TOKEN_GRAMMAR: Tuple[TokenRule, ...] = (
    # Strength
    TokenRule(
        name="strength_duration",
        family="strength",
        pattern=rf"strength_main_(?P<minutes>{INT})min{TRAILER}",
        examples=("strength_main_50min",),
    ),
    TokenRule(
        name="strength_percent",
        family="strength",
        pattern=(
            rf"strength_(?P<name>{NAME})_(?P<sets>{INT})x(?P<reps>{INT}|amrap)"
            rf"_(?P<pct>\d{{1,3}})\s*(?:pct|percent|%){TRAILER}"
        ),
        examples=("strength_bench_press_5x5_70pct", "strength_squat_3x5_77pct", "strength_deadlift_1rm_3x3_85percent"),
    ),
    TokenRule(
        name="strength_absolute",
        family="strength",
        pattern=(
            rf"strength_(?P<name>{NAME})_(?P<sets>{INT})x(?P<reps>{INT}|amrap)"
            rf"_(?P<weight>{DECIMAL})(?P<weight_unit>lbs?|kg){TRAILER}"
        ),
        examples=("strength_barbell_row_4x8_135lb", "strength_front_squat_3x5_80kg"),
    ),
    TokenRule(
        name="strength_scheme",
        family="strength",
        pattern=rf"strength_(?P<name>{NAME})_(?P<sets>{INT})x(?P<reps>{INT}|amrap){TRAILER}",
        examples=("strength_pull_ups_4x6", "strength_push_ups_3xamrap"),
    ),
    # Swim
    TokenRule(
        name="swim_span",
        family="swim",
        pattern=rf"swim_(?P<kind>warmup|cooldown)_(?P<dist>{INT}){SWIM_UNIT}{TRAILER}",
        examples=("swim_warmup_400yd", "swim_cooldown_200m"),
    ),
    TokenRule(
        name="swim_drills_set",
        family="swim",
        pattern=rf"swim_drills_(?P<reps>{INT})x(?P<dist>{INT}){SWIM_UNIT}_(?P<name>[a-z0-9_]+)",
        examples=("swim_drills_6x50yd_catchup",),
    ),
    TokenRule(
        name="swim_drill",
        family="swim",
        pattern=rf"swim_drill_(?P<name>{NAME})_(?P<reps>{INT})x(?P<dist>{INT}){SWIM_UNIT}{SWIM_REST}",
        examples=("swim_drill_catchup_4x50yd_r15", "swim_drill_single_arm_6x25m"),
    ),
    TokenRule(
        name="swim_pull_kick",
        family="swim",
        pattern=rf"swim_(?P<kind>pull|kick)_(?P<reps>{INT})x(?P<dist>{INT}){SWIM_UNIT}{SWIM_REST}{TRAILER}",
        examples=("swim_pull_4x100yd_r20", "swim_kick_6x50m"),
    ),
    TokenRule(
        name="swim_aerobic",
        family="swim",
        pattern=rf"swim_aerobic_(?P<reps>{INT})x(?P<dist>{INT}){SWIM_UNIT}{SWIM_REST}{TRAILER}",
        examples=("swim_aerobic_8x100yd_r15", "swim_aerobic_3x400m"),
    ),
    # Run
    TokenRule(
        name="run_interval",
        family="run",
        pattern=(
            rf"interval_(?P<reps>{INT})x(?P<dist>{DECIMAL})(?P<unit>m|mi)_(?P<tag>[a-z0-9]+?)"
            rf"{PACE_OFFSET}(?:_r(?P<rest>{INT})(?:-(?P<rest_hi>{INT}))?(?P<rest_unit>min|s)?)?"
        ),
        examples=("interval_6x800m_5kpace_r2min", "interval_4x1mi_5kpace_plus0:15_r2-3min"),
    ),
    TokenRule(
        name="run_cruise",
        family="run",
        pattern=(
            rf"cruise_(?P<reps>{INT})x(?P<dist>\d+(?:_\d+|\.\d+)?)mi_(?P<tag>[a-z0-9]+?)"
            rf"{PACE_OFFSET}(?:_r(?P<rest>{INT})min)?"
        ),
        examples=("cruise_4x1_5mi_5kpace_plus10s_r3min",),
    ),
    TokenRule(
        name="run_tempo",
        family="run",
        pattern=rf"tempo_(?P<dist>{DECIMAL})mi_(?P<tag>[a-z0-9]+?){PACE_OFFSET}",
        examples=("tempo_4mi_5kpace_plus0:45", "tempo_3mi_easypace"),
    ),
    TokenRule(
        name="run_long",
        family="run",
        pattern=rf"longrun_(?P<minutes>{INT})min{TRAILER}",
        examples=("longrun_150min_easypace",),
    ),
    TokenRule(
        name="run_strides",
        family="run",
        pattern=rf"strides_(?P<reps>{INT})x(?P<seconds>{INT})s{TRAILER}",
        examples=("strides_6x20s",),
    ),
    TokenRule(
        name="run_speed",
        family="run",
        pattern=rf"speed_(?P<reps>{INT})x(?P<seconds>{INT})s(?:_.*?)?_r(?P<rest>{INT})s",
        examples=("speed_8x20s_fast_r60s",),
    ),
    # Bike
    TokenRule(
        name="bike_zone_set",
        family="bike",
        pattern=(
            rf"bike_(?P<zone>ss|thr|vo2)_(?P<reps>{INT})x(?P<minutes>{INT})min"
            rf"{SET_NOTES}(?:_r(?P<rest>{INT})min)?{TRAILER}"
        ),
        examples=("bike_ss_3x12min_r4min", "bike_vo2_5x3min_r3min", "bike_thr_2x20min"),
    ),
    TokenRule(
        name="bike_endurance",
        family="bike",
        pattern=rf"bike_endurance_(?P<minutes>{INT})min{TRAILER}",
        examples=("bike_endurance_90min", "bike_endurance_60min_z2"),
    ),
    TokenRule(
        name="bike_set",
        family="bike",
        pattern=(
            rf"bike_[a-z0-9]+_(?P<reps>{INT})x(?P<minutes>{INT})min"
            rf"{SET_NOTES}(?:_r(?P<rest>{INT})min)?{TRAILER}"
        ),
        examples=("bike_taper_2x12min_z3_r5min",),
    ),
    # Warm-up / cool-down spans for any discipline
    TokenRule(
        name="span",
        family="span",
        pattern=(
            rf"(?P<kind>warmup|cooldown)(?:_[a-z0-9_]*?)?_(?P<lo>\d{{1,3}})"
            rf"(?:\s*(?:-|–|to)\s*(?P<hi>\d{{1,3}}))?\s*min{TRAILER}"
        ),
        examples=("warmup_run_easy_10-15min", "cooldown_easy_10min", "warmup_bike_quality_15min_fastpedal"),
    ),
)

RULES_BY_NAME = {rule.name: rule for rule in TOKEN_GRAMMAR}
FAMILIES = tuple(dict.fromkeys(rule.family for rule in TOKEN_GRAMMAR))


def match_token(token: str) -> Tuple[Optional[TokenRule], Optional[re.Match]]:
    """Return the first rule matching the token and its match object."""
    candidate = (token or "").strip().lower()
    if not candidate:
        return None, None
    for rule in TOKEN_GRAMMAR:
        m = rule.match(candidate)
        if m:
            return rule, m
    return None, None


def validate_grammar() -> List[str]:
    """
    Check the table for consistency.

    Every example must be claimed by its own rule and not by an earlier one,
    otherwise the ordering silently shadows that rule. Returns a list of
    problems (empty when the grammar is sound).
    """
    problems = []
    seen = set()
    for rule in TOKEN_GRAMMAR:
        if rule.name in seen:
            problems.append(f"duplicate rule name: {rule.name}")
        seen.add(rule.name)
        if not rule.examples:
            problems.append(f"{rule.name}: no examples")
        for example in rule.examples:
            matched, _ = match_token(example)
            if matched is None:
                problems.append(f"{rule.name}: example {example!r} matches no rule")
            elif matched.name != rule.name:
                problems.append(f"{rule.name}: example {example!r} is shadowed by {matched.name}")
    return problems
