"""
Text Parser

Parses free-text workout descriptions into strength ParsedSteps.

Handles formats like:
- "Back Squat 3x5 @ 75%"
- "Back Squat 3x5 — 225 lb"
- "Romanian Deadlift 3 x 8-10"
- "Main: Bench Press 5x5 @ 70% 1RM; Accessory: Plank 3x45s"
"""

import re
import logging
from typing import List, Optional

from pydantic import ValidationError

from .base import (
    BaseParser,
    display_name,
    is_accessory,
    is_warmup_or_cooldown,
    normalize_exercise_name,
    split_segments,
    strip_lead_in,
)
from .models import IntensityTarget, ParsedStep, StepKind, TargetKind
from workout_prefill_api.utils import lower_from_range, safe_positive_int, to_float

logger = logging.getLogger(__name__)

REPS = r"(?P<reps>\d+(?:\s*[-–]\s*\d+)?|amrap)"
SCHEME = rf"(?P<sets>\d+)\s*[x×]\s*{REPS}"


class TextParser(BaseParser):
    """Parser for free-text descriptions"""

    # Ordered most specific first; first match wins per segment
    PERCENT_PATTERN = re.compile(
        rf"^(?P<name>.*?)\s+{SCHEME}\s*(?:@|at)\s*(?P<pct>\d{{1,3}}(?:\.\d+)?)\s*%",
        re.IGNORECASE,
    )  # "Back Squat 3x5 @ 75%"
    WEIGHT_PATTERN = re.compile(
        rf"^(?P<name>.*?)\s+{SCHEME}\b.*?(?:[—–-]|@)\s*(?P<weight>\d+(?:\.\d+)?)\s*(?P<unit>lbs?|kg)\b",
        re.IGNORECASE,
    )  # "Back Squat 3x5 — 225 lb"
    GENERIC_PATTERN = re.compile(
        rf"^(?P<name>.*?)\s+{SCHEME}",
        re.IGNORECASE,
    )  # "Pull-Ups 4x6"

    def parse(self, text: Optional[str]) -> List[ParsedStep]:
        if not text or not isinstance(text, str):
            return []

        steps: List[ParsedStep] = []
        for segment in split_segments(text):
            step = self.parse_segment(segment)
            if step is not None:
                steps.append(step)
        return steps

    def parse_segment(self, segment: str) -> Optional[ParsedStep]:
        """Classify one segment; warm-up, cool-down and accessory work yield None."""
        if is_warmup_or_cooldown(segment):
            logger.debug(f"Skipping warm-up/cool-down segment: {segment!r}")
            return None

        line = strip_lead_in(segment)

        for pattern, target_builder in (
            (self.PERCENT_PATTERN, self._percent_target),
            (self.WEIGHT_PATTERN, self._weight_target),
            (self.GENERIC_PATTERN, None),
        ):
            m = pattern.match(line)
            if not m:
                continue
            return self._build(m, segment, target_builder(m) if target_builder else None)

        logger.debug(f"Unmatched segment skipped: {segment!r}")
        return None

    @staticmethod
    def _percent_target(m: re.Match) -> IntensityTarget:
        return IntensityTarget(kind=TargetKind.PERCENT_1RM, percent=to_float(m.group("pct")))

    @staticmethod
    def _weight_target(m: re.Match) -> IntensityTarget:
        unit = "kg" if m.group("unit").lower() == "kg" else "lb"
        return IntensityTarget(kind=TargetKind.ABSOLUTE, weight=to_float(m.group("weight")), weight_unit=unit)

    def _build(self, m: re.Match, segment: str, target: Optional[IntensityTarget]) -> Optional[ParsedStep]:
        raw_name = m.group("name")
        name = display_name(raw_name)
        if not re.search(r"[A-Za-z]", name):
            return None
        if is_accessory(name):
            logger.debug(f"Skipping accessory exercise: {name!r}")
            return None

        reps_raw = m.group("reps")
        reps = "AMRAP" if reps_raw.lower() == "amrap" else max(1, lower_from_range(reps_raw) or 1)
        try:
            return ParsedStep(
                kind=StepKind.STRENGTH_SET,
                exercise=normalize_exercise_name(raw_name),
                display_name=name,
                sets=safe_positive_int(m.group("sets")),
                reps=reps,
                target=target,
                discipline="strength",
                source=segment,
            )
        except ValidationError as e:
            logger.debug(f"Segment {segment!r} could not be built: {e}")
            return None
