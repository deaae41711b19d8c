"""
Completed-workout save and edit-session snapshot endpoints.

POST /workouts/strength validates and stores a logged strength session;
/snapshots/{key} exposes the recovery snapshot store to the logging screen.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel, Field

from workout_prefill_api.models import LoggedExercise
from workout_prefill_api.services.session_snapshot import SnapshotStore
from workout_prefill_api.services.workout_service import (
    PersistenceError,
    WorkoutService,
    WorkoutValidationError,
    build_completed_workout,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class SaveStrengthWorkoutRequest(BaseModel):
    """Request model for POST /workouts/strength"""
    exercises: List[LoggedExercise] = Field(default_factory=list)
    name: Optional[str] = None
    date: Optional[str] = Field(default=None, description="ISO date (YYYY-MM-DD)")
    planned_id: Optional[str] = None
    started_at: Optional[datetime] = None
    user_id: Optional[str] = None


@router.post("/workouts/strength")
def save_strength_workout(payload: SaveStrengthWorkoutRequest):
    """Validate, shape and store a logged strength session."""
    try:
        workout = build_completed_workout(
            payload.exercises,
            name=payload.name,
            workout_date=payload.date,
            started_at=payload.started_at,
            planned_id=payload.planned_id,
            user_id=payload.user_id,
        )
    except WorkoutValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        saved = WorkoutService.save(workout)
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"success": True, "workout": saved}


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


@router.get("/snapshots/{key}")
def get_snapshot(key: str):
    snapshot = SnapshotStore().load(key)
    if snapshot is None:
        raise HTTPException(status_code=404, detail=f"No snapshot for {key}")
    return snapshot


@router.put("/snapshots/{key}")
def put_snapshot(key: str, data: Dict[str, Any] = Body(...)):
    saved = SnapshotStore().save(key, data)
    if not saved:
        logger.warning(f"Snapshot {key} was not stored")
    return {"saved": saved}


@router.delete("/snapshots/{key}")
def delete_snapshot(key: str):
    SnapshotStore().clear(key)
    return {"cleared": True}
