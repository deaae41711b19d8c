"""
Planned-workout summary.

Display title, duration, swim distance and a one-line friendly summary for a
planned session, built from the same parsed steps the logger prefill uses.
"""

import re
import logging
from typing import Any, List, Optional

from workout_prefill_api.models import PlannedSummary
from workout_prefill_api.parsers.grammar import match_token
from workout_prefill_api.parsers.models import Baseline, ExportHints, ParsedStep, PlannedWorkout, TargetKind
from workout_prefill_api.parsers.token_parser import METERS_PER_MILE, TokenParser
from workout_prefill_api.services.resolver import (
    format_power_band,
    pace_band,
    parse_pace,
    power_band,
    resolve_duration_minutes,
    resolve_step_pace,
    resolve_swim_yards,
    resolve_weight,
)
from workout_prefill_api.utils import format_seconds

logger = logging.getLogger(__name__)

SEPARATOR = " • "


def workout_title(workout: PlannedWorkout) -> str:
    """Discipline-specific display title."""
    structured = (workout.workout_structure or {}).get("title") if workout.workout_structure else None
    explicit = str(structured or workout.workout_title or "").strip()
    if explicit:
        return explicit

    name = (workout.name or "").strip()
    lower = workout.text.lower()
    tags = [str(t).lower() for t in (workout.tags or [])]
    discipline = workout.discipline

    if discipline == "ride":
        if "long_ride" in tags:
            return "Ride — Long Ride"
        if "vo2" in lower:
            return "Ride — VO2"
        if re.search(r"threshold|thr_", lower):
            return "Ride — Threshold"
        if re.search(r"sweet\s*spot|\bss\b", lower):
            return "Ride — Sweet Spot"
        if "recovery" in lower:
            return "Ride — Recovery"
        if re.search(r"endurance|z2", lower):
            return "Ride — Endurance"
        return name or "Ride"
    if discipline == "run":
        if "long_run" in tags:
            return "Run — Long Run"
        if "tempo" in lower:
            return "Run — Tempo"
        if re.search(r"intervals?", lower) or re.search(r"\d+\s*[x×]\s*\d+", lower):
            return "Run — Intervals"
        return name or "Run"
    if discipline == "swim":
        if "opt_kind:technique" in tags or re.search(r"drills|technique", lower):
            return "Swim — Technique"
        return name or "Swim — Endurance"
    if discipline == "strength":
        return name or "Strength"
    return name or "Session"


def swim_subtitle(tokens: List[str]) -> Optional[str]:
    """
    Compact swim set description in the units the plan was written in.

    Example: "WU 400 yd • Drills: catchup 4x50 @ :15r • Pull 4x100 • CD 200 yd"
    """
    warmup = cooldown = None
    drills: List[str] = []
    pulls: List[str] = []
    kicks: List[str] = []
    aerobics: List[str] = []

    def _add(bucket: List[str], text: str) -> None:
        if text not in bucket:
            bucket.append(text)

    for token in tokens:
        rule, m = match_token(token)
        if rule is None or rule.family != "swim":
            continue
        groups = m.groupdict()
        rest = f" @ :{int(groups['rest'])}r" if groups.get("rest") else ""
        if rule.name == "swim_span":
            text = f"{int(groups['dist'])} {groups['unit'].lower()}"
            if groups["kind"] == "warmup":
                warmup = f"WU {text}"
            else:
                cooldown = f"CD {text}"
            continue
        scheme = f"{int(groups['reps'])}x{int(groups['dist'])}"
        if rule.name in ("swim_drill", "swim_drills_set"):
            _add(drills, f"{groups['name'].replace('_', ' ')} {scheme}{rest}")
        elif rule.name == "swim_pull_kick":
            _add(pulls if groups["kind"] == "pull" else kicks, f"{scheme}{rest}")
        elif rule.name == "swim_aerobic":
            _add(aerobics, f"{scheme}{rest}")

    parts = []
    if warmup:
        parts.append(warmup)
    if drills:
        parts.append(f"Drills: {', '.join(drills)}")
    if pulls:
        parts.append(f"Pull {', '.join(pulls)}")
    if kicks:
        parts.append(f"Kick {', '.join(kicks)}")
    if aerobics:
        parts.append(f"Aerobic {', '.join(aerobics)}")
    if cooldown:
        parts.append(cooldown)
    return SEPARATOR.join(parts) if parts else None


def _distance_text(step: ParsedStep) -> str:
    meters = step.distance_m or 0
    if "mi_" in (step.source or ""):
        return f"{round(meters / METERS_PER_MILE, 2):g} mi"
    return f"{int(round(meters))} m"


def _minutes_text(seconds: Optional[int]) -> str:
    minutes = (seconds or 0) / 60
    return f"{minutes:g} min"


def describe_step(step: ParsedStep, baseline: Optional[Baseline] = None, hints: Optional[ExportHints] = None) -> str:
    """One human-readable line for a parsed step."""
    if step.kind == "strength_set":
        reps = step.reps if step.reps is not None else "?"
        text = f"{step.display_name or step.exercise} {step.sets}×{reps}"
        weight = resolve_weight(step, baseline)
        if weight:
            text += f" @ {weight:g} lb"
        elif step.target is not None and step.target.kind == TargetKind.PERCENT_1RM:
            text += f" @ {step.target.percent:g}%"
        return text

    if step.kind in ("warmup", "cooldown"):
        label = "Warm-up" if step.kind == "warmup" else "Cool-down"
        if step.distance_m:
            return f"{label} {_distance_text(step)}"
        return f"{label} {_minutes_text(step.duration_s)}".strip()

    prefix = f"{step.sets} × " if step.sets > 1 else ""
    if step.distance_m:
        text = f"{prefix}{_distance_text(step)}"
        if step.label == "tempo":
            text = f"Tempo {text}"
        pace = resolve_step_pace(step, baseline)
        parsed = parse_pace(pace)
        if parsed:
            seconds, unit = parsed
            text += f" @ {format_seconds(seconds)}/{unit} ({pace_band(pace, step.kind, hints)})"
        if step.rest_s:
            text += f" w {format_seconds(step.rest_s)} rest"
        return text

    if step.duration_s:
        if step.target is not None and step.target.kind == TargetKind.POWER:
            band = power_band(step.target.power_zone, baseline, hints)
            text = f"{prefix}{_minutes_text(step.duration_s)}"
            if band:
                text += f" @ {format_power_band(band)}"
        elif step.label == "strides":
            text = f"{prefix}{step.duration_s}s strides"
        elif step.label in ("endurance", "long run", "strength"):
            text = f"{step.label.capitalize()} {_minutes_text(step.duration_s)}"
        else:
            text = f"{prefix}{_minutes_text(step.duration_s)}"
        if step.rest_s:
            text += f" with {format_seconds(step.rest_s)} easy"
        return text

    return step.display_name or step.label or ""


def friendly_summary(steps: List[ParsedStep], baseline: Optional[Baseline] = None, hints: Optional[ExportHints] = None) -> List[str]:
    return [line for line in (describe_step(s, baseline, hints) for s in steps) if line]


def build_summary(workout: Any, baselines: Any = None, export_hints: Any = None) -> PlannedSummary:
    """Assemble the display summary for a planned session."""
    planned = PlannedWorkout.from_any(workout)
    baseline = Baseline.from_any(baselines)
    hints = ExportHints.from_any(export_hints if export_hints is not None else planned.export_hints)

    steps = TokenParser().parse(planned.tokens)
    lines = friendly_summary(steps, baseline, hints)

    subtitle = swim_subtitle(planned.tokens) if planned.discipline == "swim" else None
    if subtitle is None:
        subtitle = SEPARATOR.join(lines) if lines else (planned.text.strip() or None)

    return PlannedSummary(
        title=workout_title(planned),
        minutes=resolve_duration_minutes(planned, baseline, steps),
        swim_yards=resolve_swim_yards(planned, steps),
        subtitle=subtitle,
        friendly_summary=SEPARATOR.join(lines),
        lines=lines,
    )
