"""
Parser Models

Pydantic models for the parsed-step schema that the token and text parsers
output to, plus the read-only reference data (baselines, export hints) and the
loosely-shaped planned-workout row the prefill pipeline consumes.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from workout_prefill_api.utils import to_float, to_int, lower_from_range, safe_positive_int

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    """Role a parsed step plays in the session"""
    WARMUP = "warmup"
    COOLDOWN = "cooldown"
    WORK = "work"
    RECOVERY = "recovery"
    STRENGTH_SET = "strength_set"


class TargetKind(str, Enum):
    """How a step's intensity is expressed"""
    PERCENT_1RM = "percent_1rm"  # "75pct", "@ 70%"
    ABSOLUTE = "absolute"        # "— 225 lb"
    PACE = "pace"                # "7:30/mi"
    PACE_TAG = "pace_tag"        # "5kpace_plus0:45"
    POWER = "power"              # "bike_ss_..."


class IntensityTarget(BaseModel):
    """Symbolic intensity attached to a step, resolved later against baselines"""
    kind: TargetKind
    percent: Optional[float] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    weight_unit: Optional[Literal["lb", "kg"]] = None
    pace: Optional[str] = None
    pace_tag: Optional[str] = None
    pace_offset_s: Optional[int] = None
    power_zone: Optional[Literal["ss", "thr", "vo2"]] = None

    class Config:
        use_enum_values = True


class ParsedStep(BaseModel):
    """One matched token or text segment"""
    kind: StepKind
    exercise: str = Field(default="", description="Lowercased, trimmed exercise name")
    display_name: str = Field(default="", description="Name in its original casing")
    sets: int = Field(default=1, ge=1)
    reps: Optional[Union[int, str]] = Field(default=None, description="Integer reps or 'AMRAP'")
    target: Optional[IntensityTarget] = None
    distance_m: Optional[float] = Field(default=None, ge=0, description="Distance per repeat")
    duration_s: Optional[int] = Field(default=None, ge=0, description="Duration per repeat")
    rest_s: Optional[int] = Field(default=None, ge=0, description="Rest between repeats")
    discipline: Optional[Literal["run", "ride", "swim", "strength"]] = None
    label: Optional[str] = None
    source: Optional[str] = None

    class Config:
        use_enum_values = True

    @field_validator("exercise", mode="before")
    @classmethod
    def _normalize_exercise(cls, v: Any) -> str:
        return str(v or "").strip().lower()

    @field_validator("reps")
    @classmethod
    def _reps_positive(cls, v: Optional[Union[int, str]]) -> Optional[Union[int, str]]:
        if isinstance(v, int) and v < 1:
            raise ValueError("numeric reps must be >= 1")
        return v

    def total_distance_m(self) -> float:
        return (self.distance_m or 0) * self.sets

    def total_duration_s(self) -> int:
        """Work time plus rest between repeats, when the step carries a duration."""
        work = (self.duration_s or 0) * self.sets
        rest = (self.rest_s or 0) * max(0, self.sets - 1)
        return work + rest


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

LIFT_FIELDS = ("squat", "bench", "deadlift", "overhead", "overheadPress1RM", "ftp")


class Baseline(BaseModel):
    """
    A user's stored reference performance numbers.

    Lift values that are not numeric are treated as absent, so resolution
    degrades to "unknown" instead of failing.
    """
    squat: Optional[float] = None
    bench: Optional[float] = None
    deadlift: Optional[float] = None
    overhead: Optional[float] = None
    overhead_press_1rm: Optional[float] = Field(default=None, alias="overheadPress1RM")
    ftp: Optional[float] = None
    five_k_pace: Optional[str] = Field(default=None, alias="fiveK_pace")
    easy_pace: Optional[str] = Field(default=None, alias="easyPace")
    swim_pace_100: Optional[str] = Field(default=None, alias="swimPace100")

    class Config:
        extra = "ignore"
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def _merge_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if not data.get("fiveK_pace") and (data.get("fiveKPace") or data.get("fiveK")):
            data = dict(data)
            data["fiveK_pace"] = data.get("fiveKPace") or data.get("fiveK")
        return data

    @field_validator("squat", "bench", "deadlift", "overhead", "overhead_press_1rm", "ftp", mode="before")
    @classmethod
    def _numeric_or_none(cls, v: Any) -> Optional[float]:
        if isinstance(v, bool):
            return None
        value = to_float(v)
        if value is None or value <= 0:
            return None
        return value

    @field_validator("five_k_pace", "easy_pace", "swim_pace_100", mode="before")
    @classmethod
    def _pace_string(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

    @classmethod
    def from_any(cls, data: Any) -> "Baseline":
        """Build a baseline from a plain dict, a backend row, or nothing."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return cls()
        if isinstance(data.get("performance_numbers"), dict):
            data = data["performance_numbers"]
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Ignoring malformed baseline: {e}")
            return cls()


class ExportHints(BaseModel):
    """Per-workout tolerance overrides; missing values fall back to settings"""
    pace_tolerance_quality: Optional[float] = None
    pace_tolerance_easy: Optional[float] = None
    power_tolerance_SS_thr: Optional[float] = None
    power_tolerance_VO2: Optional[float] = None

    class Config:
        extra = "ignore"

    @field_validator("*", mode="before")
    @classmethod
    def _tolerance(cls, v: Any) -> Optional[float]:
        value = to_float(v)
        if value is None or value < 0 or value >= 1:
            return None
        return value

    @classmethod
    def from_any(cls, data: Any) -> "ExportHints":
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)


# ---------------------------------------------------------------------------
# Planned workout and its source variants
# ---------------------------------------------------------------------------


class StrengthExerciseSpec(BaseModel):
    """Exercise already shaped as name/sets/reps/weight"""
    name: str
    sets: int = 3
    reps: int = 0
    weight: float = 0
    percent: Optional[float] = None  # "70%" given in place of a weight

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _percent_weight(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("weight"), str) and "%" in data["weight"]:
            data = dict(data)
            data["percent"] = lower_from_range(data.pop("weight"))
        return data

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return str(v or "").strip()

    @field_validator("sets", mode="before")
    @classmethod
    def _sets(cls, v: Any) -> int:
        return safe_positive_int(v, default=3)

    @field_validator("reps", mode="before")
    @classmethod
    def _reps(cls, v: Any) -> int:
        return lower_from_range(v) or 0

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, v: Any) -> float:
        value = to_float(v)
        return value if value is not None and value > 0 else 0


class ComputedStep(BaseModel):
    """A step from the upstream planning stage, already segmented and typed"""
    kind: Optional[str] = None
    duration_s: Optional[float] = None
    distance_m: Optional[float] = None
    pace_sec_per_mi: Optional[float] = None
    power_range: Optional[Dict[str, Any]] = None
    label: Optional[str] = None
    strength: Optional[StrengthExerciseSpec] = None

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _distance_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("distance_m") is None and "distanceMeters" in data:
            data = dict(data)
            data["distance_m"] = data["distanceMeters"]
        return data

    @field_validator("duration_s", "distance_m", "pace_sec_per_mi", mode="before")
    @classmethod
    def _non_negative(cls, v: Any) -> Optional[float]:
        value = to_float(v)
        return value if value is not None and value >= 0 else None

    @field_validator("strength", mode="before")
    @classmethod
    def _strength(cls, v: Any) -> Any:
        if isinstance(v, dict) and str(v.get("name") or "").strip():
            return v
        return None


class ComputedStepsSource(BaseModel):
    kind: Literal["computed_steps"] = "computed_steps"
    steps: List[ComputedStep]


class StrengthExercisesSource(BaseModel):
    kind: Literal["strength_exercises"] = "strength_exercises"
    exercises: List[StrengthExerciseSpec]


class StepsPresetSource(BaseModel):
    kind: Literal["steps_preset"] = "steps_preset"
    tokens: List[str]


class DescriptionSource(BaseModel):
    kind: Literal["description"] = "description"
    text: str


PlannedSource = Union[ComputedStepsSource, StrengthExercisesSource, StepsPresetSource, DescriptionSource]


class PlannedWorkout(BaseModel):
    """
    A planned-workout row in whatever shape it is currently stored.

    The same logical workout can carry any subset of computed steps,
    structured strength exercises, a token preset or free text. `sources()`
    turns those into validated variants in preference order.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    rendered_description: Optional[str] = None
    duration: Optional[float] = None
    computed: Optional[Dict[str, Any]] = None
    strength_exercises: Optional[List[Any]] = None
    steps_preset: Optional[List[Any]] = None
    export_hints: Optional[Dict[str, Any]] = None
    tags: Optional[List[Any]] = None
    workout_title: Optional[str] = None
    workout_structure: Optional[Dict[str, Any]] = None

    class Config:
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("type", mode="before")
    @classmethod
    def _type_lower(cls, v: Any) -> Optional[str]:
        return str(v).strip().lower() if v else None

    @classmethod
    def from_any(cls, data: Any) -> "PlannedWorkout":
        """Validate a row, dropping any top-level field with the wrong shape."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err.get("loc")}
            logger.debug(f"Dropping malformed planned-workout fields: {sorted(map(str, bad))}")
            return cls.model_validate({k: v for k, v in data.items() if k not in bad})

    @property
    def discipline(self) -> Optional[str]:
        t = (self.type or "").lower()
        if t in ("ride", "bike", "cycling"):
            return "ride"
        if t in ("run", "running"):
            return "run"
        if t in ("swim", "swimming"):
            return "swim"
        if t == "strength":
            return "strength"
        return t or None

    @property
    def tokens(self) -> List[str]:
        return [str(t) for t in (self.steps_preset or []) if isinstance(t, str) and t.strip()]

    @property
    def text(self) -> str:
        return self.rendered_description or self.description or ""

    @property
    def computed_steps(self) -> List[ComputedStep]:
        raw = (self.computed or {}).get("steps")
        if not isinstance(raw, list):
            return []
        steps = []
        for item in raw:
            try:
                steps.append(ComputedStep.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping malformed computed step: {item!r}")
        return steps

    @property
    def total_duration_seconds(self) -> Optional[float]:
        value = to_float((self.computed or {}).get("total_duration_seconds"))
        return value if value is not None and value > 0 else None

    def sources(self) -> Iterator[PlannedSource]:
        """Yield the populated source variants, most trusted first."""
        steps = [s for s in self.computed_steps if s.strength is not None]
        if steps:
            yield ComputedStepsSource(steps=steps)

        exercises = []
        for item in self.strength_exercises or []:
            if not isinstance(item, dict):
                continue
            try:
                spec = StrengthExerciseSpec.model_validate(item)
            except ValidationError:
                logger.debug(f"Skipping malformed strength exercise: {item!r}")
                continue
            if spec.name:
                exercises.append(spec)
        if exercises:
            yield StrengthExercisesSource(exercises=exercises)

        if self.tokens:
            yield StepsPresetSource(tokens=self.tokens)

        if self.text.strip():
            yield DescriptionSource(text=self.text)
