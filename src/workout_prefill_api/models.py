"""Data models for the strength logger and its prefill output."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

BarType = str  # "standard", "womens", "safety", "ez", "trap", "cambered", "swiss", "technique"


class LoggedSet(BaseModel):
    """One editable set in the logger."""
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0, ge=0)
    rir: Optional[int] = Field(default=None, ge=0)
    completed: bool = False
    bar_type: BarType = Field(default="standard", alias="barType")

    class Config:
        extra = "ignore"
        populate_by_name = True

    @field_validator("reps", mode="before")
    @classmethod
    def _reps(cls, v):
        try:
            return max(0, int(float(v)))
        except (TypeError, ValueError):
            return 0

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, v):
        try:
            return max(0.0, float(v))
        except (TypeError, ValueError):
            return 0.0

    @property
    def volume(self) -> float:
        if self.reps > 0 and self.weight > 0:
            return self.reps * self.weight
        return 0


class LoggedExercise(BaseModel):
    """An exercise with its ordered sets, as bound to the logging screen."""
    id: str
    name: str = ""
    sets: List[LoggedSet] = Field(default_factory=lambda: [LoggedSet()])
    expanded: bool = True

    class Config:
        extra = "ignore"

    @classmethod
    def empty(cls, exercise_id: str = "ex-0-empty") -> "LoggedExercise":
        """A blank exercise so the screen is never left without a row to edit."""
        return cls(id=exercise_id, name="", sets=[LoggedSet()], expanded=True)


class AlternativeOption(BaseModel):
    """One interchangeable exercise offered by the plan."""
    label: str
    exercise_name: str = Field(alias="exerciseName")
    sets: int = Field(default=1, ge=1)
    reps_lower_bound: int = Field(default=1, ge=1, alias="repsLowerBound")

    class Config:
        populate_by_name = True


class AlternativeChoiceSet(BaseModel):
    """A pending choice between interchangeable exercises."""
    label: str
    options: List[AlternativeOption] = Field(default_factory=list)
    # "Pull-Ups/Chin-Ups" for slash alternatives
    combined_name: Optional[str] = Field(default=None, alias="combinedName")

    class Config:
        populate_by_name = True


class PrefillSource(str, Enum):
    """Which part of the planned row the prefill came from."""
    COMPUTED_STEPS = "computed_steps"
    STRENGTH_EXERCISES = "strength_exercises"
    STEPS_PRESET = "steps_preset"
    DESCRIPTION = "description"
    EMPTY = "empty"


class PrefillResult(BaseModel):
    """Initial state for the strength logger."""
    exercises: List[LoggedExercise]
    pending_alternatives: Optional[AlternativeChoiceSet] = Field(default=None, alias="pendingAlternatives")
    source: PrefillSource = PrefillSource.EMPTY

    class Config:
        use_enum_values = True
        populate_by_name = True


class CompletedWorkout(BaseModel):
    """Row written back to the backend when the user saves a logged session."""
    id: str
    name: str
    type: str = "strength"
    date: str
    description: str = ""
    duration: int = 0
    strength_exercises: List[LoggedExercise] = Field(default_factory=list)
    workout_status: str = "completed"
    completed_manually: bool = True
    planned_id: Optional[str] = None
    user_id: Optional[str] = None


class PlannedSummary(BaseModel):
    """Display summary of a planned session."""
    title: str
    minutes: Optional[int] = None
    swim_yards: Optional[int] = None
    subtitle: Optional[str] = None
    friendly_summary: str = ""
    lines: List[str] = Field(default_factory=list)
