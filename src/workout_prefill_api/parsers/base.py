"""
Base Parser

Shared base class and matching primitives for the token and text parsers.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

from .models import ParsedStep

logger = logging.getLogger(__name__)


# Segment delimiters for free text: newline, semicolon, bullet
SEGMENT_SPLIT_PATTERN = re.compile(r"\n|;|\u2022")

# "warm up", "warmup", "warm-up", "warm‑up" (any U+2010..U+2015 dash, NBSP)
WARMUP_PATTERN = re.compile(r"warm[\s\u00a0]*(?:-|[\u2010-\u2015])?\s*up", re.IGNORECASE)
COOLDOWN_PATTERN = re.compile(r"cool[\s\u00a0]*(?:-|[\u2010-\u2015])?\s*down", re.IGNORECASE)

# Name cleanup before comparison
PAREN_NOTE_PATTERN = re.compile(r"\s*\([^)]*\)")
AT_NOTE_PATTERN = re.compile(r"\s*@.*$")
DASH_NOTE_PATTERN = re.compile(r"\s+[–—]\s*.*$")
NAME_SEPARATOR_PATTERN = re.compile(r"[\s_\-\u2010-\u2015]+")

# Sets x reps, "3x5", "4 × 8-10", "3xAMRAP"
SETS_REPS_PATTERN = re.compile(
    r"(?P<sets>\d+)\s*[x×]\s*(?P<reps>\d+(?:\s*[-–]\s*\d+)?|amrap)",
    re.IGNORECASE,
)

# "Main:", "Strength – Power:", "A1:" ahead of the exercise
LEAD_IN_PATTERN = re.compile(r"^\s*[A-Za-z][\w\s\-/&\u2010-\u2015\u2026.]{0,40}:\s*(?=\S)")
# "1.", "A1)", "- ", "* " list markers
LIST_MARKER_PATTERN = re.compile(r"^\s*(?:[-*]\s+|\d+[.)]\s+|[A-Za-z]\d[.)]\s+)")

# Exercises done against body weight; weight always resolves to zero
BODYWEIGHT_KEYWORDS = (
    "pull-up", "pull up", "pullup",
    "chin-up", "chin up", "chinup",
    "push-up", "push up", "pushup",
    "dip",
    "burpee",
    "sit-up", "sit up", "situp",
    "muscle-up", "muscle up",
    "inverted row",
    "air squat",
    "pistol squat",
    "plank",
    "mountain climber",
    "bodyweight",
)

# Accessory / core work, left for manual entry
ACCESSORY_KEYWORDS = (
    "plank",
    "rollout", "roll-out", "ab wheel",
    "carry", "carries",
    "farmer",
    "hanging",
    "dead bug",
    "bird dog",
    "pallof",
    "hollow hold", "hollow body",
    "copenhagen",
    "side bridge",
    "face pull",
)


def split_segments(text: str) -> List[str]:
    """Split free text into trimmed, non-empty segments."""
    if not text:
        return []
    return [seg.strip() for seg in SEGMENT_SPLIT_PATTERN.split(text) if seg and seg.strip()]


def strip_lead_in(segment: str) -> str:
    """
    Drop a section label and list marker ahead of the exercise.

    A label only counts when it carries no sets x reps of its own, so
    "Squat 3x5: heavy" is left alone.

    Examples:
        "A2: Pull-Ups/Chin-Ups 4x6" -> "Pull-Ups/Chin-Ups 4x6"
        "Strength – Power: Back Squat 5x3" -> "Back Squat 5x3"
        "2. Barbell Row 4x8" -> "Barbell Row 4x8"
    """
    line = segment or ""
    lead_in = LEAD_IN_PATTERN.match(line)
    if lead_in and not SETS_REPS_PATTERN.search(lead_in.group(0)):
        line = line[lead_in.end():]
    return LIST_MARKER_PATTERN.sub("", line, count=1).strip()


def is_warmup_or_cooldown(text: str) -> bool:
    return bool(WARMUP_PATTERN.search(text or "") or COOLDOWN_PATTERN.search(text or ""))


def _has_keyword(name: str, keywords: Iterable[str]) -> bool:
    lowered = (name or "").lower()
    for keyword in keywords:
        # "dip" must not match "dipper" but should match "dips"
        if re.search(rf"\b{re.escape(keyword)}(?:e?s)?\b", lowered):
            return True
    return False


def is_bodyweight(name: str) -> bool:
    return _has_keyword(name, BODYWEIGHT_KEYWORDS)


def is_accessory(name: str) -> bool:
    return _has_keyword(name, ACCESSORY_KEYWORDS)


def normalize_exercise_name(name: str) -> str:
    """
    Normalize an exercise name for comparison.

    Strips parenthetical notes, trailing "@ ..." annotations and trailing
    em/en-dash notes, folds hyphens, underscores and whitespace to a single
    space and lowercases.

    Examples:
        "Pull-Ups (weighted)" -> "pull ups"
        "pull_ups" -> "pull ups"
        "Back Squat @ 75%" -> "back squat"
        "Bench Press – pause 1s" -> "bench press"
    """
    cleaned = PAREN_NOTE_PATTERN.sub("", name or "")
    cleaned = AT_NOTE_PATTERN.sub("", cleaned)
    cleaned = DASH_NOTE_PATTERN.sub("", cleaned)
    return NAME_SEPARATOR_PATTERN.sub(" ", cleaned).strip().lower()


def display_name(name: str) -> str:
    """Clean a name for display, keeping its original casing."""
    cleaned = PAREN_NOTE_PATTERN.sub("", name or "")
    cleaned = AT_NOTE_PATTERN.sub("", cleaned)
    cleaned = DASH_NOTE_PATTERN.sub("", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" -:\t")
    return cleaned


class BaseParser(ABC):
    """Abstract base class for step parsers"""

    @abstractmethod
    def parse(self, source) -> List[ParsedStep]:
        """
        Parse the input into ParsedSteps.

        Never raises on malformed input; anything unrecognized is skipped.
        """
        pass

    @staticmethod
    def strength_steps(steps: List[ParsedStep]) -> List[ParsedStep]:
        """Filter to the steps the strength logger prefills from."""
        return [s for s in steps if s.kind == "strength_set"]
