"""Utility functions."""
import math
import re
from typing import Any, List, Optional


def to_int(s: Any) -> Optional[int]:
    """Convert a value to int, returning None if conversion fails."""
    if s is None or isinstance(s, bool):
        return None
    try:
        return int(float(s)) if isinstance(s, (int, float)) else int(str(s).strip())
    except Exception:
        return None


def to_float(s: Any) -> Optional[float]:
    """Convert a value to a finite float, returning None if conversion fails."""
    if s is None or isinstance(s, bool):
        return None
    try:
        value = float(s)
    except Exception:
        return None
    return value if math.isfinite(value) else None


def safe_positive_int(s: Any, default: int = 1) -> int:
    """Parse a count that must be at least 1, falling back to `default`."""
    value = to_int(s)
    if value is None:
        value = lower_from_range(s)
    if value is None or value < 1:
        return max(1, default)
    return value


def lower_from_range(txt: Any) -> Optional[int]:
    """Extract the lower bound from '8-10', '8' or 8."""
    if isinstance(txt, bool) or txt is None:
        return None
    if isinstance(txt, (int, float)):
        return int(txt) if math.isfinite(txt) else None
    m = re.match(r"\s*(\d+)", str(txt))
    return int(m.group(1)) if m else None


def format_seconds(seconds: float) -> str:
    """Format seconds as m:ss."""
    n = max(0, int(math.floor(seconds + 0.5)))
    return f"{n // 60}:{n % 60:02d}"


def slugify(txt: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (txt or "").lower()).strip("-")
    return slug or "exercise"


# ---------------------------------------------------------------------------
# Rest timer entry
# ---------------------------------------------------------------------------

MAX_TIMER_SECONDS = 1800


def parse_timer_input(raw: Optional[str]) -> Optional[int]:
    """
    Parse a rest-timer entry into seconds.

    Accepts "1:30", "2m"/"2min", "90s"/"90sec", and bare digits where one or
    two digits are seconds and three or four digits read as MMSS ("130" is
    1:30). Values are capped at 30 minutes; anything else returns None.
    """
    if not raw:
        return None
    txt = str(raw).strip().lower()

    m = re.match(r"^(\d{1,2}):([0-5]?\d)$", txt)
    if m:
        return min(MAX_TIMER_SECONDS, int(m.group(1)) * 60 + int(m.group(2)))

    m = re.match(r"^(\d{1,3})\s*m(in)?$", txt)
    if m:
        return min(MAX_TIMER_SECONDS, int(m.group(1)) * 60)

    m = re.match(r"^(\d{1,4})\s*s(ec)?$", txt)
    if m:
        return min(MAX_TIMER_SECONDS, int(m.group(1)))

    if re.match(r"^\d{1,4}$", txt):
        n = int(txt)
        if len(txt) <= 2:
            return min(MAX_TIMER_SECONDS, n)
        minutes, seconds = divmod(n, 100)
        return min(MAX_TIMER_SECONDS, minutes * 60 + min(59, seconds))

    return None


# ---------------------------------------------------------------------------
# Exercise name suggestions
# ---------------------------------------------------------------------------

COMMON_EXERCISES = [
    "Deadlift", "Squat", "Back Squat", "Front Squat", "Bench Press", "Overhead Press", "Barbell Row",
    "Romanian Deadlift", "Incline Bench Press", "Decline Bench Press",
    "Barbell Curl", "Close Grip Bench Press", "Bent Over Row", "Sumo Deadlift",
    "Dumbbell Press", "Dumbbell Row", "Dumbbell Curls", "Dumbbell Flyes",
    "Lateral Raises", "Tricep Extensions", "Hammer Curls", "Chest Flyes",
    "Shoulder Press", "Single Arm Row", "Bulgarian Split Squats",
    "Push-ups", "Pull-ups", "Chin-ups", "Dips", "Planks", "Burpees",
    "Mountain Climbers", "Lunges", "Squats", "Jump Squats", "Pike Push-ups",
    "Handstand Push-ups", "L-Sits", "Pistol Squats", "Ring Dips",
    "Lat Pulldown", "Cable Row", "Leg Press", "Leg Curls", "Leg Extensions",
    "Cable Crossover", "Tricep Pushdown", "Face Pulls", "Cable Curls",
    "Kettlebell Swings", "Turkish Get-ups", "Kettlebell Snatches",
    "Goblet Squats", "Kettlebell Press", "Kettlebell Rows",
]

MAX_SUGGESTIONS = 8


def search_exercises(term: Optional[str], limit: int = MAX_SUGGESTIONS) -> List[str]:
    """Case-insensitive substring search over the common exercise list."""
    needle = (term or "").strip().lower()
    if not needle:
        return []
    return [name for name in COMMON_EXERCISES if needle in name.lower()][:limit]
