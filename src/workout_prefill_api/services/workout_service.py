"""
Completed-workout persistence.

Validates the logger's exercise list, shapes it into a completed-workout row
and writes it to the hosted backend.
"""

import logging
import uuid
from datetime import date as date_type, datetime, timezone
from typing import Any, Dict, List, Optional

from workout_prefill_api.config import settings
from workout_prefill_api.models import CompletedWorkout, LoggedExercise
from workout_prefill_api.services.retry import retry_sync_call
from workout_prefill_api.services.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

EMPTY_WORKOUT_MESSAGE = "Please add at least one exercise with a name to save the workout."


class WorkoutValidationError(ValueError):
    """The logged workout cannot be saved as-is; the message is user-facing."""


class PersistenceError(RuntimeError):
    """The backend write failed."""


def validate_exercises(exercises: List[LoggedExercise]) -> List[LoggedExercise]:
    """
    Keep exercises with a name and at least one set.

    Raises:
        WorkoutValidationError: If nothing is left to save
    """
    valid = [ex for ex in exercises if ex.name.strip() and ex.sets]
    if not valid:
        raise WorkoutValidationError(EMPTY_WORKOUT_MESSAGE)
    return valid


def _default_name(day: date_type) -> str:
    return f"Strength - {day.month}/{day.day}/{day.year}"


def build_completed_workout(
    exercises: List[LoggedExercise],
    name: Optional[str] = None,
    workout_date: Optional[str] = None,
    started_at: Optional[datetime] = None,
    planned_id: Optional[str] = None,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> CompletedWorkout:
    """Shape a validated exercise list into the row the backend stores."""
    valid = validate_exercises(exercises)
    now = now or datetime.now(timezone.utc)

    duration = 0
    if started_at is not None:
        if started_at.tzinfo is None and now.tzinfo is not None:
            started_at = started_at.replace(tzinfo=now.tzinfo)
        duration = max(0, int((now - started_at).total_seconds() / 60 + 0.5))

    description = ", ".join(
        f"{ex.name}: {sum(1 for s in ex.sets if s.reps > 0 and s.weight > 0)}/{len(ex.sets)} sets"
        for ex in valid
    )

    return CompletedWorkout(
        id=planned_id or str(uuid.uuid4()),
        name=(name or "").strip() or _default_name(now.date()),
        date=workout_date or now.date().isoformat(),
        description=description,
        duration=duration,
        strength_exercises=valid,
        planned_id=planned_id,
        user_id=user_id,
    )


class WorkoutService:
    """Service for saving completed workouts."""

    TABLE_NAME = "workouts"

    @staticmethod
    def save(workout: CompletedWorkout) -> Dict[str, Any]:
        """
        Insert a completed workout row.

        Args:
            workout: Row built by build_completed_workout

        Returns:
            The stored row

        Raises:
            PersistenceError: If the backend is unavailable or the insert fails
        """
        supabase = get_supabase_client()
        if not supabase:
            raise PersistenceError("Backend is not configured")

        row = workout.model_dump(mode="json", by_alias=True)

        def _insert():
            return supabase.table(WorkoutService.TABLE_NAME).insert(row).execute()

        try:
            result = retry_sync_call(_insert, max_attempts=settings.PERSISTENCE_MAX_ATTEMPTS)
        except Exception as e:
            logger.error(f"Failed to save workout {workout.id}: {e}")
            raise PersistenceError(f"Failed to save workout: {e}") from e

        logger.info(f"Saved completed workout {workout.id} ({len(workout.strength_exercises)} exercises)")
        if result.data:
            return result.data[0]
        return row
