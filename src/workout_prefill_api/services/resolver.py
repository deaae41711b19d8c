"""
Numeric resolver.

Turns a step's symbolic intensity (percent of 1RM, pace tag, power zone) into
concrete numbers against a user's baselines, and estimates session length and
swim distance. Every function here is total: malformed or missing data
resolves to 0 or None, never an exception.
"""

import math
import re
import logging
from typing import Iterable, List, Optional, Tuple

from workout_prefill_api.config import settings
from workout_prefill_api.parsers.base import is_bodyweight
from workout_prefill_api.parsers.models import (
    Baseline,
    ComputedStep,
    ExportHints,
    ParsedStep,
    PlannedWorkout,
    StepKind,
    TargetKind,
)
from workout_prefill_api.parsers.token_parser import METERS_PER_MILE, METERS_PER_YARD, TokenParser
from workout_prefill_api.utils import format_seconds

logger = logging.getLogger(__name__)

PACE_PATTERN = re.compile(
    r"(\d+):(\d{2})\s*(?:/\s*(mi|km|100\s*yd|100\s*m)\b|per\s*(mi|km)\b)?",
    re.IGNORECASE,
)
MINUTES_PATTERN = re.compile(r"(\d{1,3})(?:\s*(?:-|–|to)\s*(\d{1,3}))?\s*min\b", re.IGNORECASE)

EASY_KINDS = (StepKind.RECOVERY, StepKind.WARMUP, StepKind.COOLDOWN)

# Target power as a fraction of FTP
POWER_ZONE_FACTORS = {
    "ss": 0.91,
    "thr": 0.98,
    "vo2": 1.10,
}

METERS_PER_UNIT = {
    "mi": METERS_PER_MILE,
    "km": 1000.0,
    "100yd": 100 * METERS_PER_YARD,
    "100m": 100.0,
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Strength loads
# ---------------------------------------------------------------------------


def round_to_nearest_5(value: float) -> int:
    """Round to the nearest multiple of 5 (halves up), never below 5."""
    return max(5, _round_half_up(value / 5) * 5)


def lift_for_exercise(name: str) -> str:
    """Map an exercise name to the baseline lift its percentages refer to."""
    lowered = (name or "").lower()
    if "deadlift" in lowered or re.search(r"\bdead\b", lowered):
        return "deadlift"
    if "bench" in lowered:
        return "bench"
    if "overhead" in lowered or re.search(r"\bohp\b", lowered):
        return "overhead"
    return "squat"


def one_rep_max(baseline: Optional[Baseline], lift: str) -> Optional[float]:
    if baseline is None:
        return None
    if lift == "overhead":
        return baseline.overhead or baseline.overhead_press_1rm
    return getattr(baseline, lift, None)


def resolve_weight(step: ParsedStep, baseline: Optional[Baseline]) -> float:
    """
    Resolve the working weight for a strength step.

    Bodyweight movements are always 0. Percent targets resolve against the
    mapped 1RM, or 0 when that 1RM is unknown. Absolute targets pass through.
    """
    name = step.display_name or step.exercise
    if is_bodyweight(name):
        return 0
    target = step.target
    if target is None:
        return 0
    if target.kind == TargetKind.PERCENT_1RM and target.percent:
        orm = one_rep_max(baseline, lift_for_exercise(name))
        if not orm:
            return 0
        return round_to_nearest_5(orm * target.percent / 100)
    if target.kind == TargetKind.ABSOLUTE and target.weight:
        return target.weight
    return 0


# ---------------------------------------------------------------------------
# Paces
# ---------------------------------------------------------------------------


def parse_pace(pace: Optional[str], default_unit: str = "mi") -> Optional[Tuple[int, str]]:
    """Parse "7:30/mi", "4:40 per km", "1:45/100yd" into (seconds, unit)."""
    if not pace or not isinstance(pace, str):
        return None
    m = PACE_PATTERN.search(pace)
    if not m:
        return None
    unit = (m.group(3) or m.group(4) or default_unit).lower().replace(" ", "")
    return int(m.group(1)) * 60 + int(m.group(2)), unit


def format_pace(seconds: float, unit: str) -> str:
    return f"{format_seconds(seconds)}/{unit}"


def _hint(hints: Optional[ExportHints], name: str, default: float) -> float:
    value = getattr(hints, name, None) if hints is not None else None
    return default if value is None else value


def pace_tolerance(kind: str, hints: Optional[ExportHints] = None) -> float:
    """Easy tolerance for recovery/warm-up/cool-down, quality tolerance otherwise."""
    if kind in EASY_KINDS:
        return _hint(hints, "pace_tolerance_easy", settings.PACE_TOLERANCE_EASY)
    return _hint(hints, "pace_tolerance_quality", settings.PACE_TOLERANCE_QUALITY)


def pace_band_bounds(pace: str, kind: str, hints: Optional[ExportHints] = None) -> Optional[Tuple[int, int, str]]:
    """Low and high bound in whole seconds, plus the unit."""
    parsed = parse_pace(pace)
    if parsed is None:
        return None
    seconds, unit = parsed
    tol = pace_tolerance(kind, hints)
    return _round_half_up(seconds * (1 - tol)), _round_half_up(seconds * (1 + tol)), unit


def pace_band(pace: str, kind: str, hints: Optional[ExportHints] = None) -> Optional[str]:
    """Format a pace tolerance band as "mm:ss–mm:ss/unit"."""
    bounds = pace_band_bounds(pace, kind, hints)
    if bounds is None:
        return None
    lo, hi, unit = bounds
    return f"{format_seconds(lo)}–{format_seconds(hi)}/{unit}"


def resolve_pace_tag(tag: Optional[str], offset_s: Optional[int], baseline: Optional[Baseline]) -> Optional[str]:
    """Resolve "5kpace"/"easypace" against the baseline paces, plus any offset."""
    if not tag or baseline is None:
        return None
    base = None
    if "5kpace" in tag:
        base = baseline.five_k_pace
    elif "easypace" in tag:
        base = baseline.easy_pace
    parsed = parse_pace(base)
    if parsed is None:
        return None
    seconds, unit = parsed
    return format_pace(seconds + (offset_s or 0), unit)


def resolve_step_pace(step: ParsedStep, baseline: Optional[Baseline]) -> Optional[str]:
    target = step.target
    if target is None:
        return None
    if target.kind == TargetKind.PACE:
        return target.pace
    if target.kind == TargetKind.PACE_TAG:
        return resolve_pace_tag(target.pace_tag, target.pace_offset_s, baseline)
    return None


def seconds_per_meter(pace: Optional[str], default_unit: str = "mi") -> Optional[float]:
    parsed = parse_pace(pace, default_unit=default_unit)
    if parsed is None:
        return None
    seconds, unit = parsed
    meters = METERS_PER_UNIT.get(unit)
    if not meters:
        return None
    return seconds / meters


# ---------------------------------------------------------------------------
# Power
# ---------------------------------------------------------------------------


def power_band(zone: Optional[str], baseline: Optional[Baseline], hints: Optional[ExportHints] = None) -> Optional[Tuple[int, int]]:
    """Watt range around the zone's share of FTP; None without an FTP."""
    factor = POWER_ZONE_FACTORS.get((zone or "").lower())
    if factor is None or baseline is None or not baseline.ftp:
        return None
    if zone == "vo2":
        tol = _hint(hints, "power_tolerance_VO2", settings.POWER_TOLERANCE_VO2)
    else:
        tol = _hint(hints, "power_tolerance_SS_thr", settings.POWER_TOLERANCE_SS_THR)
    center = baseline.ftp * factor
    return _round_half_up(center * (1 - tol)), _round_half_up(center * (1 + tol))


def format_power_band(band: Optional[Tuple[int, int]]) -> Optional[str]:
    if band is None:
        return None
    return f"{band[0]}–{band[1]} W"


# ---------------------------------------------------------------------------
# Duration and distance
# ---------------------------------------------------------------------------


def _default_pace(discipline: Optional[str], baseline: Optional[Baseline]) -> Tuple[Optional[str], str]:
    if baseline is None:
        return None, "mi"
    if discipline == "swim":
        return baseline.swim_pace_100, "100yd"
    if discipline == "run":
        return baseline.easy_pace or baseline.five_k_pace, "mi"
    return None, "mi"


def step_seconds(step: ParsedStep, baseline: Optional[Baseline]) -> float:
    """Seconds a parsed step takes, estimating distance work from its pace."""
    if step.duration_s:
        return step.total_duration_s()
    if not step.distance_m:
        return 0
    pace = resolve_step_pace(step, baseline)
    spm = seconds_per_meter(pace)
    if spm is None:
        pace, unit = _default_pace(step.discipline, baseline)
        spm = seconds_per_meter(pace, default_unit=unit)
    if spm is None:
        return 0
    rest = (step.rest_s or 0) * max(0, step.sets - 1)
    return step.total_distance_m() * spm + rest


def computed_step_seconds(step: ComputedStep) -> float:
    if step.duration_s:
        return step.duration_s
    if step.distance_m and step.pace_sec_per_mi:
        return step.distance_m * step.pace_sec_per_mi / METERS_PER_MILE
    return 0


def estimate_text_seconds(text: Optional[str]) -> int:
    """Sum every "N min" (or "N-M min", averaged) mentioned in the text."""
    total = 0
    for m in MINUTES_PATTERN.finditer(text or ""):
        a = int(m.group(1))
        b = int(m.group(2)) if m.group(2) else a
        total += _round_half_up((a + b) / 2) * 60
    return total


def _parsed_token_steps(workout: PlannedWorkout) -> List[ParsedStep]:
    return TokenParser().parse(workout.tokens)


def resolve_duration_seconds(
    workout: PlannedWorkout,
    baseline: Optional[Baseline] = None,
    steps: Optional[List[ParsedStep]] = None,
) -> Optional[float]:
    """
    Best estimate of session length in seconds.

    Precedence: the precomputed total, then the sum of computed steps, then
    the sum of token steps (plus explicit minutes in tokens no rule claims),
    then minutes mentioned in the description, then the authored duration.
    """
    total = workout.total_duration_seconds
    if total:
        return total

    computed = sum(computed_step_seconds(s) for s in workout.computed_steps)
    if computed > 0:
        return computed

    if steps is None:
        steps = _parsed_token_steps(workout)
    token_total = sum(step_seconds(s, baseline) for s in steps)
    claimed = {s.source for s in steps}
    for token in workout.tokens:
        if token.strip().lower() not in claimed:
            token_total += estimate_text_seconds(token.replace("_", " "))
    if token_total > 0:
        return token_total

    text_total = estimate_text_seconds(workout.text)
    if text_total > 0:
        return text_total

    if workout.duration and workout.duration > 0:
        return workout.duration * 60
    return None


def resolve_duration_minutes(
    workout: PlannedWorkout,
    baseline: Optional[Baseline] = None,
    steps: Optional[List[ParsedStep]] = None,
) -> Optional[int]:
    """Session length in whole minutes, at least 1; None when nothing is known."""
    seconds = resolve_duration_seconds(workout, baseline, steps)
    if seconds is None:
        return None
    return max(1, _round_half_up(seconds / 60))


def meters_to_yards(meters: float) -> int:
    return _round_half_up(meters / METERS_PER_YARD)


def resolve_swim_yards(workout: PlannedWorkout, steps: Optional[Iterable[ParsedStep]] = None) -> Optional[int]:
    """Total swim distance in yards; only computed for swim sessions."""
    if workout.discipline != "swim":
        return None
    meters = sum(s.distance_m or 0 for s in workout.computed_steps)
    if meters <= 0:
        if steps is None:
            steps = _parsed_token_steps(workout)
        meters = sum(s.total_distance_m() for s in steps)
    if meters <= 0:
        return None
    return meters_to_yards(meters)
