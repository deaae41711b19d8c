"""
Token Parser

Turns compact planning tokens ("strength_squat_3x5_77pct",
"swim_drill_catchup_4x50yd_r15", "interval_6x800m_5kpace_r2min") into
ParsedSteps. Matching is driven entirely by the rule table in grammar.py;
each rule has a `_build_<rule name>` method here.
"""

import math
import re
import logging
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from .base import BaseParser
from .grammar import TOKEN_GRAMMAR, TokenRule, match_token
from .models import IntensityTarget, ParsedStep, StepKind, TargetKind
from workout_prefill_api.utils import safe_positive_int, to_float

logger = logging.getLogger(__name__)

METERS_PER_YARD = 0.9144
METERS_PER_MILE = 1609.34

OFFSET_PATTERN = re.compile(r"plus(\d+)(?::(\d{2}))?(s)?", re.IGNORECASE)


def parse_pace_offset(token: Optional[str]) -> int:
    """
    Parse a pace offset into seconds.

    "plus0:45" -> 45, "plus1" -> 60 (bare numbers are minutes), "plus10s" -> 10.
    """
    if not token:
        return 0
    m = OFFSET_PATTERN.search(token)
    if not m:
        return 0
    if m.group(3):
        return int(m.group(1))
    if m.group(2):
        return int(m.group(1)) * 60 + int(m.group(2))
    return int(m.group(1)) * 60


def strength_display_name(raw: str) -> str:
    """'back_squat_1rm' -> 'Back Squat'"""
    words = [w for w in re.split(r"[_\s]+", raw or "") if w and w.lower() != "1rm"]
    return " ".join(w.capitalize() for w in words)


def _swim_meters(dist: str, unit: str) -> float:
    value = float(dist)
    return value * METERS_PER_YARD if unit.lower() == "yd" else value


def _run_meters(dist: str, unit: str) -> float:
    value = float(dist.replace("_", "."))
    return value * METERS_PER_MILE if unit.lower() == "mi" else value


def _rest_seconds(lo: Optional[str], hi: Optional[str], unit: Optional[str] = "min") -> Optional[int]:
    if not lo:
        return None
    a = int(lo)
    b = int(hi) if hi else a
    each = int(math.floor((a + b) / 2 + 0.5))
    return each if (unit or "min").lower() == "s" else each * 60


class TokenParser(BaseParser):
    """Parser for steps_preset token arrays"""

    def __init__(self):
        missing = [rule.name for rule in TOKEN_GRAMMAR if not hasattr(self, f"_build_{rule.name}")]
        if missing:
            raise RuntimeError(f"No builder for token rules: {', '.join(missing)}")

    def parse(self, tokens: Union[str, Iterable[str], None]) -> List[ParsedStep]:
        if tokens is None:
            return []
        if isinstance(tokens, str):
            tokens = [tokens]

        steps: List[ParsedStep] = []
        for token in tokens:
            if not isinstance(token, str):
                continue
            steps.extend(self.parse_token(token))
        return steps

    def parse_token(self, token: str) -> List[ParsedStep]:
        """Parse a single token; unmatched or malformed tokens yield nothing."""
        rule, m = match_token(token)
        if rule is None:
            logger.debug(f"Unmatched token skipped: {token!r}")
            return []

        builder = getattr(self, f"_build_{rule.name}")
        try:
            built = builder(m, token.strip().lower())
        except (ValueError, ValidationError) as e:
            logger.debug(f"Token {token!r} matched {rule.name} but could not be built: {e}")
            return []
        return [built] if isinstance(built, ParsedStep) else list(built)

    # ------------------------------------------------------------------
    # Strength
    # ------------------------------------------------------------------

    def _strength_step(self, m: re.Match, token: str, target: Optional[IntensityTarget]) -> ParsedStep:
        name = strength_display_name(m.group("name"))
        reps_raw = m.group("reps").lower()
        reps = "AMRAP" if reps_raw == "amrap" else safe_positive_int(reps_raw)
        return ParsedStep(
            kind=StepKind.STRENGTH_SET,
            exercise=name,
            display_name=name,
            sets=safe_positive_int(m.group("sets")),
            reps=reps,
            target=target,
            discipline="strength",
            source=token,
        )

    def _build_strength_duration(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            duration_s=int(m.group("minutes")) * 60,
            discipline="strength",
            label="strength",
            source=token,
        )

    def _build_strength_percent(self, m: re.Match, token: str) -> ParsedStep:
        target = IntensityTarget(kind=TargetKind.PERCENT_1RM, percent=float(m.group("pct")))
        return self._strength_step(m, token, target)

    def _build_strength_absolute(self, m: re.Match, token: str) -> ParsedStep:
        unit = "kg" if m.group("weight_unit").lower() == "kg" else "lb"
        target = IntensityTarget(kind=TargetKind.ABSOLUTE, weight=to_float(m.group("weight")), weight_unit=unit)
        return self._strength_step(m, token, target)

    def _build_strength_scheme(self, m: re.Match, token: str) -> ParsedStep:
        return self._strength_step(m, token, None)

    # ------------------------------------------------------------------
    # Swim
    # ------------------------------------------------------------------

    def _build_swim_span(self, m: re.Match, token: str) -> ParsedStep:
        kind = StepKind.WARMUP if m.group("kind") == "warmup" else StepKind.COOLDOWN
        return ParsedStep(
            kind=kind,
            distance_m=_swim_meters(m.group("dist"), m.group("unit")),
            discipline="swim",
            label="WU" if kind == StepKind.WARMUP else "CD",
            source=token,
        )

    def _swim_repeats(self, m: re.Match, token: str, label: str, name: str = "") -> ParsedStep:
        rest = m.groupdict().get("rest")
        drill = strength_display_name(name)
        return ParsedStep(
            kind=StepKind.WORK,
            exercise=drill,
            display_name=drill,
            sets=safe_positive_int(m.group("reps")),
            distance_m=_swim_meters(m.group("dist"), m.group("unit")),
            rest_s=int(rest) if rest else None,
            discipline="swim",
            label=label,
            source=token,
        )

    def _build_swim_drills_set(self, m: re.Match, token: str) -> ParsedStep:
        return self._swim_repeats(m, token, "drill", m.group("name"))

    def _build_swim_drill(self, m: re.Match, token: str) -> ParsedStep:
        return self._swim_repeats(m, token, "drill", m.group("name"))

    def _build_swim_pull_kick(self, m: re.Match, token: str) -> ParsedStep:
        return self._swim_repeats(m, token, m.group("kind"))

    def _build_swim_aerobic(self, m: re.Match, token: str) -> ParsedStep:
        return self._swim_repeats(m, token, "aerobic")

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def _pace_target(self, m: re.Match) -> IntensityTarget:
        return IntensityTarget(
            kind=TargetKind.PACE_TAG,
            pace_tag=m.group("tag"),
            pace_offset_s=parse_pace_offset(m.group("offset")),
        )

    def _build_run_interval(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            sets=safe_positive_int(m.group("reps")),
            distance_m=_run_meters(m.group("dist"), m.group("unit")),
            rest_s=_rest_seconds(m.group("rest"), m.group("rest_hi"), m.group("rest_unit")),
            target=self._pace_target(m),
            discipline="run",
            label="interval",
            source=token,
        )

    def _build_run_cruise(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            sets=safe_positive_int(m.group("reps")),
            distance_m=_run_meters(m.group("dist"), "mi"),
            rest_s=_rest_seconds(m.group("rest"), None),
            target=self._pace_target(m),
            discipline="run",
            label="cruise",
            source=token,
        )

    def _build_run_tempo(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            distance_m=_run_meters(m.group("dist"), "mi"),
            target=self._pace_target(m),
            discipline="run",
            label="tempo",
            source=token,
        )

    def _build_run_long(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            duration_s=int(m.group("minutes")) * 60,
            discipline="run",
            label="long run",
            source=token,
        )

    def _build_run_strides(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            sets=safe_positive_int(m.group("reps")),
            duration_s=int(m.group("seconds")),
            discipline="run",
            label="strides",
            source=token,
        )

    def _build_run_speed(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            sets=safe_positive_int(m.group("reps")),
            duration_s=int(m.group("seconds")),
            rest_s=int(m.group("rest")),
            discipline="run",
            label="speed",
            source=token,
        )

    # ------------------------------------------------------------------
    # Bike
    # ------------------------------------------------------------------

    def _bike_set(self, m: re.Match, token: str, target: Optional[IntensityTarget]) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            sets=safe_positive_int(m.group("reps")),
            duration_s=int(m.group("minutes")) * 60,
            rest_s=_rest_seconds(m.group("rest"), None),
            target=target,
            discipline="ride",
            label="set",
            source=token,
        )

    def _build_bike_zone_set(self, m: re.Match, token: str) -> ParsedStep:
        target = IntensityTarget(kind=TargetKind.POWER, power_zone=m.group("zone"))
        return self._bike_set(m, token, target)

    def _build_bike_set(self, m: re.Match, token: str) -> ParsedStep:
        return self._bike_set(m, token, None)

    def _build_bike_endurance(self, m: re.Match, token: str) -> ParsedStep:
        return ParsedStep(
            kind=StepKind.WORK,
            duration_s=int(m.group("minutes")) * 60,
            discipline="ride",
            label="endurance",
            source=token,
        )

    # ------------------------------------------------------------------
    # Warm-up / cool-down spans
    # ------------------------------------------------------------------

    def _build_span(self, m: re.Match, token: str) -> ParsedStep:
        kind = StepKind.WARMUP if m.group("kind") == "warmup" else StepKind.COOLDOWN
        discipline = None
        if "_run" in token:
            discipline = "run"
        elif "_bike" in token or "_ride" in token:
            discipline = "ride"
        elif "_swim" in token:
            discipline = "swim"
        return ParsedStep(
            kind=kind,
            duration_s=_rest_seconds(m.group("lo"), m.group("hi")),
            discipline=discipline,
            label="WU" if kind == StepKind.WARMUP else "CD",
            source=token,
        )


def rule_for(token: str) -> Optional[TokenRule]:
    """Name the grammar rule a token would be parsed with, if any."""
    rule, _ = match_token(token)
    return rule
