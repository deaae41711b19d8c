"""Plate math for loading a barbell to a target weight."""
import math
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field

# (plate weight, plates available per side), heaviest first
IMPERIAL_PLATES: List[Tuple[float, int]] = [
    (45, 4),
    (35, 2),
    (25, 2),
    (10, 2),
    (5, 2),
    (2.5, 2),
]

BAR_TYPES: Dict[str, Tuple[float, str]] = {
    "standard": (45, "Barbell (45lb)"),
    "womens": (33, "Women's (33lb)"),
    "safety": (45, "Safety Squat (45lb)"),
    "ez": (25, "EZ Curl (25lb)"),
    "trap": (60, "Trap/Hex (60lb)"),
    "cambered": (55, "Cambered (55lb)"),
    "swiss": (35, "Swiss/Football (35lb)"),
    "technique": (15, "Technique (15lb)"),
}


class PlateCount(BaseModel):
    weight: float
    count: int = Field(ge=1)


class PlateBreakdown(BaseModel):
    """Plates to put on each side of the bar."""
    target_weight: float
    bar_type: str
    bar_weight: float
    bar_name: str
    per_side: List[PlateCount] = Field(default_factory=list)
    possible: bool = False
    remainder_per_side: float = 0


def bar_weight(bar_type: str) -> float:
    return BAR_TYPES.get(bar_type, BAR_TYPES["standard"])[0]


def calculate_plates(weight: float, bar_type: str = "standard") -> PlateBreakdown:
    """
    Greedy plate breakdown for `weight` on the given bar.

    A weight at or below the bar itself loads no plates and is reported as not
    possible; `possible` is otherwise true when the plates make the weight to
    within 0.1 per side.
    """
    key = bar_type if bar_type in BAR_TYPES else "standard"
    bar, bar_name = BAR_TYPES[key]
    breakdown = PlateBreakdown(target_weight=weight or 0, bar_type=key, bar_weight=bar, bar_name=bar_name)

    if not weight or weight <= bar:
        return breakdown

    remaining = (weight - bar) / 2
    for plate, available in IMPERIAL_PLATES:
        use = min(int(math.floor(remaining / plate)), available)
        if use > 0:
            breakdown.per_side.append(PlateCount(weight=plate, count=use))
            remaining = round(remaining - use * plate, 2)

    breakdown.remainder_per_side = remaining
    breakdown.possible = remaining <= 0.1
    return breakdown
