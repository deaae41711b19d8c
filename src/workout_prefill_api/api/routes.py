"""API routes for planned-workout parsing, prefill and summaries."""

import os
import subprocess
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from workout_prefill_api import __version__
from workout_prefill_api.navigation import (
    NavigationContext,
    NavigationError,
    ViewState,
    command_from_dict,
    resolve_transition,
)
from workout_prefill_api.parsers.text_parser import TextParser
from workout_prefill_api.parsers.token_parser import TokenParser
from workout_prefill_api.services.alternatives import extract_alternatives
from workout_prefill_api.services.plates import calculate_plates
from workout_prefill_api.services.prefill import PrefillService
from workout_prefill_api.services.summary import build_summary
from workout_prefill_api.utils import MAX_SUGGESTIONS, format_seconds, parse_timer_input, search_exercises

# ---------------------------------------------------------------------------
# Build / git metadata
# ---------------------------------------------------------------------------

BUILD_TIMESTAMP = datetime.now().isoformat()


def get_git_info():
    """Get git commit hash and timestamp if available."""
    try:
        result = subprocess.run(
            ["git", "log", "-1", "--format=%H|%ci", "--date=iso"],
            cwd=os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0 and result.stdout.strip():
            commit, date = result.stdout.strip().split("|", 1)
            return {
                "commit": commit,
                "commit_short": commit[:7],
                "commit_date": date,
            }
    except (OSError, subprocess.SubprocessError, ValueError):
        return None
    return None


GIT_INFO = get_git_info()

router = APIRouter()

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class PrefillRequest(BaseModel):
    """Request model for POST /prefill"""
    planned: Dict[str, Any] = Field(default_factory=dict, description="Planned workout row")
    baselines: Optional[Dict[str, Any]] = Field(default=None, description="User performance numbers")
    user_id: Optional[str] = Field(default=None, description="Look up baselines for this user when none are given")


class ParseTokensRequest(BaseModel):
    """Request model for POST /parse/tokens"""
    tokens: List[str] = Field(default_factory=list, max_length=500)


class ParseTextRequest(BaseModel):
    """Request model for POST /parse/text"""
    text: str = Field(..., max_length=50000, description="Workout description")


class SummaryRequest(BaseModel):
    """Request model for POST /summary"""
    workout: Dict[str, Any]
    baselines: Optional[Dict[str, Any]] = None
    export_hints: Optional[Dict[str, Any]] = None


class PlatesRequest(BaseModel):
    """Request model for POST /plates"""
    weight: float = Field(..., ge=0)
    bar_type: str = "standard"


class TimerRequest(BaseModel):
    """Request model for POST /timer/parse"""
    value: str = Field(..., max_length=20, description='Rest entry such as "1:30", "90s" or "130"')


class NavigationRequest(BaseModel):
    """Request model for POST /navigation/dispatch"""
    state: ViewState = ViewState.DASHBOARD
    context: Dict[str, Any] = Field(default_factory=dict)
    command: Dict[str, Any]


# ---------------------------------------------------------------------------
# Version / health
# ---------------------------------------------------------------------------


@router.get("/version")
async def get_version():
    """Get API version and build information."""
    version_info = {
        "service": "workout-prefill-api",
        "version": __version__,
        "build_timestamp": BUILD_TIMESTAMP,
        "build_date": BUILD_TIMESTAMP,
    }
    if GIT_INFO:
        version_info.update(
            {
                "git_commit": GIT_INFO["commit"],
                "git_commit_short": GIT_INFO["commit_short"],
                "git_commit_date": GIT_INFO["commit_date"],
            }
        )
    return JSONResponse(version_info)


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# Prefill / parsing / summary
# ---------------------------------------------------------------------------


@router.post("/prefill")
def prefill(payload: PrefillRequest):
    """Initial strength-logger exercises for a planned workout."""
    service = PrefillService()
    if payload.baselines is None and payload.user_id:
        result = service.prefill_for_user(payload.planned, payload.user_id)
    else:
        result = service.prefill(payload.planned, payload.baselines)
    return result.model_dump(by_alias=True)


@router.post("/parse/tokens")
def parse_tokens(payload: ParseTokensRequest):
    """Parse steps_preset tokens into structured steps."""
    steps = TokenParser().parse(payload.tokens)
    return {"steps": [s.model_dump() for s in steps]}


@router.post("/parse/text")
def parse_text(payload: ParseTextRequest):
    """Parse a free-text description into strength steps and any pending alternatives."""
    steps = TextParser().parse(payload.text)
    alternatives = extract_alternatives(payload.text)
    return {
        "steps": [s.model_dump() for s in steps],
        "alternatives": alternatives.model_dump(by_alias=True) if alternatives else None,
    }


@router.post("/summary")
def summary(payload: SummaryRequest):
    """Title, duration and friendly summary for a planned workout."""
    return build_summary(payload.workout, payload.baselines, payload.export_hints).model_dump()


@router.post("/plates")
def plates(payload: PlatesRequest):
    """Plates per side to load the bar to a target weight."""
    return calculate_plates(payload.weight, payload.bar_type).model_dump()


@router.get("/exercises/search")
def exercise_search(
    query: str = Query(..., min_length=1, description="Part of an exercise name"),
    limit: int = Query(default=MAX_SUGGESTIONS, ge=1, le=50, description="Max number of results"),
):
    """Exercise name suggestions for the logger's name field."""
    results = search_exercises(query, limit)
    return {"query": query, "results": results, "total": len(results)}


@router.post("/timer/parse")
def parse_timer(payload: TimerRequest):
    """Parse a rest-timer entry into seconds."""
    seconds = parse_timer_input(payload.value)
    if seconds is None:
        raise HTTPException(status_code=400, detail=f"Unrecognized timer value: {payload.value!r}")
    return {"seconds": seconds, "display": format_seconds(seconds)}


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


@router.post("/navigation/dispatch")
def navigation_dispatch(payload: NavigationRequest):
    """Apply one navigation command to a view state and context."""
    try:
        command = command_from_dict(payload.command)
        context = NavigationContext(**payload.context)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        view, context = resolve_transition(payload.state, context, command)
    except NavigationError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {"state": view.value, "context": asdict(context)}
