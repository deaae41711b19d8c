"""
Alternative-choice extraction.

Detects when a plan offers interchangeable exercises ("Pull-Ups/Chin-Ups 4x6",
"Goblet Squat 3x10 OR Split Squat 3x8") and surfaces the choice instead of
silently picking one.
"""

import re
import logging
from typing import List, Optional, Set

from workout_prefill_api.models import (
    AlternativeChoiceSet,
    AlternativeOption,
    LoggedExercise,
    LoggedSet,
)
from workout_prefill_api.parsers.base import normalize_exercise_name, split_segments, strip_lead_in
from workout_prefill_api.utils import lower_from_range, safe_positive_int, slugify

logger = logging.getLogger(__name__)

OR_PATTERN = re.compile(r"\bOR\b", re.IGNORECASE)
CANDIDATE_PATTERN = re.compile(
    r"^\s*(?P<name>.*?)\s+(?P<sets>\d+)\s*[x×]\s*(?P<reps>\d+(?:\s*[-–]\s*\d+)?)",
    re.IGNORECASE,
)
TRAILING_PAREN_PATTERN = re.compile(r"\s*\(.*?\)\s*$")

MAX_OPTIONS = 3


def _option_from_phrase(phrase: str) -> Optional[AlternativeOption]:
    m = CANDIDATE_PATTERN.match(phrase)
    if not m or not re.search(r"[A-Za-z]", m.group("name")):
        return None
    return AlternativeOption(
        label=TRAILING_PAREN_PATTERN.sub("", phrase).strip(),
        exercise_name=m.group("name").strip(),
        sets=safe_positive_int(m.group("sets")),
        reps_lower_bound=max(1, lower_from_range(m.group("reps")) or 1),
    )


def _from_or_keyword(segment: str) -> Optional[AlternativeChoiceSet]:
    if not OR_PATTERN.search(segment):
        return None
    parts = [p.strip() for p in OR_PATTERN.split(segment) if p and p.strip()]
    if len(parts) < 2:
        return None
    options = [o for o in (_option_from_phrase(p) for p in parts[:MAX_OPTIONS]) if o is not None]
    if len(options) < 2:
        return None
    return AlternativeChoiceSet(label=segment, options=options)


def _from_slash_name(segment: str) -> Optional[AlternativeChoiceSet]:
    m = CANDIDATE_PATTERN.match(segment)
    if not m or "/" not in m.group("name"):
        return None
    names = [n.strip() for n in m.group("name").split("/") if n.strip()][:MAX_OPTIONS]
    if len(names) < 2:
        return None
    sets = safe_positive_int(m.group("sets"))
    reps = max(1, lower_from_range(m.group("reps")) or 1)
    options = [
        AlternativeOption(
            label=f"{name} {sets}x{reps}",
            exercise_name=name,
            sets=sets,
            reps_lower_bound=reps,
        )
        for name in names
    ]
    return AlternativeChoiceSet(label=segment, options=options, combined_name=m.group("name").strip())


def extract_alternatives(text: Optional[str]) -> Optional[AlternativeChoiceSet]:
    """
    Return the first choice set with at least two valid options, if any.

    Segments are tried in order; within a segment an explicit OR keyword wins
    over a slash-joined exercise name.
    """
    for segment in split_segments(text or ""):
        line = strip_lead_in(segment)
        choice_set = _from_or_keyword(line) or _from_slash_name(line)
        if choice_set is not None and len(choice_set.options) >= 2:
            logger.debug(f"Found {len(choice_set.options)} alternatives in {segment!r}")
            return choice_set
    return None


def excluded_names(choice_set: Optional[AlternativeChoiceSet]) -> Set[str]:
    """Normalized names that must not be prefilled while the choice is pending."""
    if choice_set is None or len(choice_set.options) < 2:
        return set()
    names = {normalize_exercise_name(o.exercise_name) for o in choice_set.options}
    if choice_set.combined_name:
        names.add(normalize_exercise_name(choice_set.combined_name))
    names.discard("")
    return names


def exercise_for_option(option: AlternativeOption, index: int = 0) -> LoggedExercise:
    """Build the logged exercise for a chosen option; weight is left for the user."""
    return LoggedExercise(
        id=f"alt-{index}-{slugify(option.exercise_name)}",
        name=option.exercise_name,
        sets=[LoggedSet(reps=option.reps_lower_bound, weight=0) for _ in range(option.sets)],
        expanded=True,
    )


def choose_alternative(
    exercises: List[LoggedExercise],
    choice_set: AlternativeChoiceSet,
    index: int,
) -> List[LoggedExercise]:
    """
    Append the chosen option to the working list.

    Returns a new list; the caller clears its pending choice set. An
    out-of-range index raises IndexError.
    """
    if index < 0 or index >= len(choice_set.options):
        raise IndexError(f"No alternative at index {index}")
    option = choice_set.options[index]
    return list(exercises) + [exercise_for_option(option, len(exercises))]
