"""Token and free-text parsers for planned workouts."""
from .grammar import TOKEN_GRAMMAR, TokenRule, match_token, validate_grammar
from .models import (
    Baseline,
    ExportHints,
    IntensityTarget,
    ParsedStep,
    PlannedWorkout,
    StepKind,
    TargetKind,
)
from .text_parser import TextParser
from .token_parser import TokenParser

__all__ = [
    "TOKEN_GRAMMAR",
    "TokenRule",
    "match_token",
    "validate_grammar",
    "Baseline",
    "ExportHints",
    "IntensityTarget",
    "ParsedStep",
    "PlannedWorkout",
    "StepKind",
    "TargetKind",
    "TextParser",
    "TokenParser",
]
