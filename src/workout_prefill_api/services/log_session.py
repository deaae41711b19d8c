"""
Strength logger edit session.

Owns the mutable exercise list between prefill and save. Every mutation, and
teardown, writes a recovery snapshot synchronously; mount restores from that
snapshot when one exists.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from workout_prefill_api.models import (
    AlternativeChoiceSet,
    CompletedWorkout,
    LoggedExercise,
    LoggedSet,
)
from workout_prefill_api.services.alternatives import choose_alternative
from workout_prefill_api.services.prefill import PrefillService
from workout_prefill_api.services.session_snapshot import SnapshotStore
from workout_prefill_api.services.workout_service import build_completed_workout
from workout_prefill_api.utils import slugify

logger = logging.getLogger(__name__)

SET_FIELDS = ("reps", "weight", "rir", "completed", "bar_type")


class StrengthLogSession:
    """Editable exercise list for one logging screen."""

    def __init__(
        self,
        key: str,
        exercises: Optional[List[LoggedExercise]] = None,
        pending_alternatives: Optional[AlternativeChoiceSet] = None,
        store: Optional[SnapshotStore] = None,
        started_at: Optional[datetime] = None,
        planned_id: Optional[str] = None,
    ):
        self.key = key
        self.exercises: List[LoggedExercise] = list(exercises or []) or [LoggedExercise.empty()]
        self.pending_alternatives = pending_alternatives
        self.store = store
        self.started_at = started_at or datetime.now(timezone.utc)
        self.planned_id = planned_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def mount(
        cls,
        key: str,
        planned: Any = None,
        baselines: Any = None,
        store: Optional[SnapshotStore] = None,
        prefill_service: Optional[PrefillService] = None,
    ) -> "StrengthLogSession":
        """Restore the session from its snapshot, or prefill it from the plan."""
        if store is not None:
            snapshot = store.load(key)
            if snapshot:
                restored = cls.from_dict(key, snapshot, store=store)
                if restored is not None:
                    logger.info(f"Restored logger session {key} from snapshot")
                    return restored

        result = (prefill_service or PrefillService()).prefill(planned, baselines)
        planned_id = planned.get("id") if isinstance(planned, dict) else None
        session = cls(
            key,
            exercises=result.exercises,
            pending_alternatives=result.pending_alternatives,
            store=store,
            planned_id=str(planned_id) if planned_id is not None else None,
        )
        session.snapshot()
        return session

    def snapshot(self) -> None:
        if self.store is not None:
            self.store.save(self.key, self.to_dict())

    def teardown(self) -> None:
        self.snapshot()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercises": [ex.model_dump(by_alias=True) for ex in self.exercises],
            "pending_alternatives": (
                self.pending_alternatives.model_dump(by_alias=True) if self.pending_alternatives else None
            ),
            "started_at": self.started_at.isoformat(),
            "planned_id": self.planned_id,
        }

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any], store: Optional[SnapshotStore] = None) -> Optional["StrengthLogSession"]:
        try:
            exercises = [LoggedExercise.model_validate(ex) for ex in data.get("exercises") or []]
            pending = data.get("pending_alternatives")
            started = data.get("started_at")
            return cls(
                key,
                exercises=exercises,
                pending_alternatives=AlternativeChoiceSet.model_validate(pending) if pending else None,
                store=store,
                started_at=datetime.fromisoformat(started) if started else None,
                planned_id=data.get("planned_id"),
            )
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable snapshot for session {key}: {e}")
            return None

    # ------------------------------------------------------------------
    # Exercises
    # ------------------------------------------------------------------

    def _new_id(self, name: str) -> str:
        taken = {ex.id for ex in self.exercises}
        index = len(self.exercises)
        while f"ex-{index}-{slugify(name)}" in taken:
            index += 1
        return f"ex-{index}-{slugify(name)}"

    def get_exercise(self, exercise_id: str) -> LoggedExercise:
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        raise KeyError(exercise_id)

    def add_exercise(self, name: str = "") -> LoggedExercise:
        exercise = LoggedExercise(id=self._new_id(name), name=name.strip(), sets=[LoggedSet()], expanded=True)
        self.exercises.append(exercise)
        self.snapshot()
        return exercise

    def rename_exercise(self, exercise_id: str, name: str) -> LoggedExercise:
        exercise = self.get_exercise(exercise_id)
        exercise.name = (name or "").strip()
        self.snapshot()
        return exercise

    def delete_exercise(self, exercise_id: str) -> None:
        """Remove an exercise; removing the last one leaves a blank row."""
        exercise = self.get_exercise(exercise_id)
        self.exercises.remove(exercise)
        if not self.exercises:
            self.exercises.append(LoggedExercise(id=self._new_id(""), name="", sets=[LoggedSet()]))
        self.snapshot()

    def toggle_expanded(self, exercise_id: str) -> None:
        exercise = self.get_exercise(exercise_id)
        exercise.expanded = not exercise.expanded
        self.snapshot()

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def add_set(self, exercise_id: str) -> LoggedSet:
        """Append a set carrying over the previous set's reps, weight and bar."""
        exercise = self.get_exercise(exercise_id)
        last = exercise.sets[-1] if exercise.sets else LoggedSet()
        new_set = LoggedSet(reps=last.reps, weight=last.weight, bar_type=last.bar_type)
        exercise.sets.append(new_set)
        self.snapshot()
        return new_set

    def update_set(self, exercise_id: str, set_index: int, **changes: Any) -> LoggedSet:
        exercise = self.get_exercise(exercise_id)
        if set_index < 0 or set_index >= len(exercise.sets):
            raise IndexError(f"No set {set_index} on exercise {exercise_id}")
        unknown = set(changes) - set(SET_FIELDS)
        if unknown:
            raise ValueError(f"Unknown set fields: {', '.join(sorted(unknown))}")

        current = exercise.sets[set_index].model_dump()
        current.update(changes)
        updated = LoggedSet.model_validate(current)
        exercise.sets[set_index] = updated
        self.snapshot()
        return updated

    def delete_set(self, exercise_id: str, set_index: int) -> None:
        """Remove a set; an exercise always keeps at least one."""
        exercise = self.get_exercise(exercise_id)
        if len(exercise.sets) <= 1:
            return
        if set_index < 0 or set_index >= len(exercise.sets):
            raise IndexError(f"No set {set_index} on exercise {exercise_id}")
        del exercise.sets[set_index]
        self.snapshot()

    # ------------------------------------------------------------------
    # Alternatives, totals, save
    # ------------------------------------------------------------------

    def choose_alternative(self, index: int) -> LoggedExercise:
        """Resolve the pending choice; a lone blank row is replaced, not kept."""
        if self.pending_alternatives is None:
            raise ValueError("No alternatives are pending")
        base = [ex for ex in self.exercises if ex.name.strip() or len(self.exercises) > 1]
        self.exercises = choose_alternative(base, self.pending_alternatives, index)
        self.pending_alternatives = None
        self.snapshot()
        return self.exercises[-1]

    def total_volume(self) -> float:
        """Sum of reps x weight over completed sets."""
        return sum(s.volume for ex in self.exercises for s in ex.sets if s.completed)

    def finish(
        self,
        name: Optional[str] = None,
        workout_date: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> CompletedWorkout:
        """Build the completed row and drop the recovery snapshot."""
        workout = build_completed_workout(
            self.exercises,
            name=name,
            workout_date=workout_date,
            started_at=self.started_at,
            planned_id=self.planned_id,
            user_id=user_id,
        )
        if self.store is not None:
            self.store.clear(self.key)
        return workout
