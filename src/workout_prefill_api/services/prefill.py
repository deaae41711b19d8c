"""
Prefill orchestrator.

Given a planned-workout row (in whatever shape it is stored) and the user's
baselines, produces the initial exercise list for the strength logger.
"""

import logging
from typing import Any, List, Optional, Set

from workout_prefill_api.models import (
    AlternativeChoiceSet,
    LoggedExercise,
    LoggedSet,
    PrefillResult,
    PrefillSource,
)
from workout_prefill_api.parsers.base import is_accessory, is_bodyweight, normalize_exercise_name
from workout_prefill_api.parsers.models import (
    Baseline,
    ComputedStepsSource,
    DescriptionSource,
    ParsedStep,
    PlannedSource,
    PlannedWorkout,
    StepsPresetSource,
    StrengthExerciseSpec,
    StrengthExercisesSource,
)
from workout_prefill_api.parsers.text_parser import TextParser
from workout_prefill_api.parsers.token_parser import TokenParser
from workout_prefill_api.services.alternatives import excluded_names, extract_alternatives
from workout_prefill_api.services.baseline_service import BaselineService
from workout_prefill_api.services.resolver import (
    lift_for_exercise,
    one_rep_max,
    resolve_weight,
    round_to_nearest_5,
)
from workout_prefill_api.utils import slugify

logger = logging.getLogger(__name__)


def _exercise_id(index: int, name: str) -> str:
    return f"ex-{index}-{slugify(name)}"


def _sets(count: int, reps: int, weight: float) -> List[LoggedSet]:
    return [LoggedSet(reps=reps, weight=weight) for _ in range(max(1, count))]


class PrefillService:
    """Builds the logger's starting exercises from a planned workout."""

    def __init__(
        self,
        token_parser: Optional[TokenParser] = None,
        text_parser: Optional[TextParser] = None,
    ):
        self.token_parser = token_parser or TokenParser()
        self.text_parser = text_parser or TextParser()

    def prefill(self, planned: Any, baselines: Any = None) -> PrefillResult:
        """
        Produce the initial LoggedExercise list.

        Sources are tried in preference order and the first one yielding any
        exercises wins: computed steps, structured strength_exercises, the
        steps_preset tokens, then the free-text description. A failure in one
        source falls through to the next; if nothing yields exercises the
        result holds a single empty exercise.
        """
        workout = PlannedWorkout.from_any(planned)
        baseline = Baseline.from_any(baselines)

        alternatives: Optional[AlternativeChoiceSet] = None
        excluded: Set[str] = set()

        for source in workout.sources():
            if isinstance(source, (StepsPresetSource, DescriptionSource)) and alternatives is None:
                alternatives = self._alternatives(workout)
                excluded = excluded_names(alternatives)

            try:
                exercises = self._from_source(source, baseline, excluded)
            except Exception as e:
                logger.warning(f"Prefill source {source.kind} failed for workout {workout.id}: {e}")
                continue

            if exercises:
                logger.info(f"Prefilled {len(exercises)} exercises from {source.kind} for workout {workout.id}")
                pending = alternatives if source.kind in ("steps_preset", "description") else None
                return PrefillResult(exercises=exercises, pending_alternatives=pending, source=source.kind)

        if alternatives is None:
            alternatives = self._alternatives(workout)
        logger.debug(f"No prefill source yielded exercises for workout {workout.id}")
        return PrefillResult(
            exercises=[LoggedExercise.empty()],
            pending_alternatives=alternatives,
            source=PrefillSource.EMPTY,
        )

    def prefill_for_user(self, planned: Any, user_id: Optional[str]) -> PrefillResult:
        """Prefill using the baselines stored for `user_id`."""
        baseline = BaselineService.get_baseline(user_id) if user_id else None
        return self.prefill(planned, baseline)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def _alternatives(self, workout: PlannedWorkout) -> Optional[AlternativeChoiceSet]:
        try:
            return extract_alternatives(workout.text)
        except Exception as e:
            logger.warning(f"Alternative extraction failed for workout {workout.id}: {e}")
            return None

    def _from_source(self, source: PlannedSource, baseline: Baseline, excluded: Set[str]) -> List[LoggedExercise]:
        if isinstance(source, ComputedStepsSource):
            specs = [step.strength for step in source.steps if step.strength is not None]
            return self._from_specs(self._merge_consecutive(specs), baseline)
        if isinstance(source, StrengthExercisesSource):
            return self._from_specs(source.exercises, baseline)
        if isinstance(source, StepsPresetSource):
            return self._from_steps(self.token_parser.parse(source.tokens), baseline, excluded)
        if isinstance(source, DescriptionSource):
            return self._from_steps(self.text_parser.parse(source.text), baseline, excluded)
        return []

    @staticmethod
    def _merge_consecutive(specs: List[StrengthExerciseSpec]) -> List[StrengthExerciseSpec]:
        """Computed plans may list one step per set; fold runs of the same exercise."""
        merged: List[StrengthExerciseSpec] = []
        folding = False
        for spec in specs:
            previous = merged[-1] if merged else None
            if (
                previous is not None
                and spec.sets == 1
                and (folding or previous.sets == 1)
                and previous.name.lower() == spec.name.lower()
                and (previous.reps, previous.weight, previous.percent) == (spec.reps, spec.weight, spec.percent)
            ):
                previous.sets += 1
                folding = True
                continue
            merged.append(spec.model_copy())
            folding = False
        return merged

    def _spec_weight(self, spec: StrengthExerciseSpec, baseline: Baseline) -> float:
        if spec.weight:
            return spec.weight
        if spec.percent and not is_bodyweight(spec.name):
            orm = one_rep_max(baseline, lift_for_exercise(spec.name))
            if orm:
                return round_to_nearest_5(orm * spec.percent / 100)
        return 0

    def _from_specs(self, specs: List[StrengthExerciseSpec], baseline: Baseline) -> List[LoggedExercise]:
        exercises = []
        for spec in specs:
            if not spec.name:
                continue
            exercises.append(
                LoggedExercise(
                    id=_exercise_id(len(exercises), spec.name),
                    name=spec.name,
                    sets=_sets(spec.sets, spec.reps, self._spec_weight(spec, baseline)),
                    expanded=True,
                )
            )
        return exercises

    def _from_steps(self, steps: List[ParsedStep], baseline: Baseline, excluded: Set[str]) -> List[LoggedExercise]:
        exercises = []
        for step in TokenParser.strength_steps(steps):
            name = step.display_name or step.exercise
            if normalize_exercise_name(name) in excluded:
                continue
            if is_accessory(name):
                logger.debug(f"Skipping accessory exercise: {name!r}")
                continue
            reps = step.reps if isinstance(step.reps, int) else 0
            try:
                weight = resolve_weight(step, baseline)
            except Exception as e:
                logger.warning(f"Could not resolve weight for {name!r}: {e}")
                weight = 0
            exercises.append(
                LoggedExercise(
                    id=_exercise_id(len(exercises), name),
                    name=name,
                    sets=_sets(step.sets, reps, weight),
                    expanded=True,
                )
            )
        return exercises
