"""
Test fixtures for workout-prefill-api.

Provides sample planned workouts, baselines and a mocked Supabase client so
tests run fast, deterministic and offline.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch
from typing import Dict, Any

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_prefill_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from workout_prefill_api.config import settings
from workout_prefill_api.main import app


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep snapshots in a temp dir and the backend unconfigured by default."""
    monkeypatch.setattr(settings, "SNAPSHOT_DIR", str(tmp_path / "snapshots"))
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_KEY", None)
    monkeypatch.setattr(settings, "PACE_TOLERANCE_QUALITY", 0.04)
    monkeypatch.setattr(settings, "PACE_TOLERANCE_EASY", 0.06)
    monkeypatch.setattr(settings, "POWER_TOLERANCE_SS_THR", 0.05)
    monkeypatch.setattr(settings, "POWER_TOLERANCE_VO2", 0.10)
    yield


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def api_client() -> TestClient:
    """Shared FastAPI TestClient for workout-prefill-api."""
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient (for tests needing fresh state)."""
    return TestClient(app)


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def baselines() -> Dict[str, Any]:
    """Typical stored performance numbers."""
    return {
        "squat": 315,
        "bench": 200,
        "deadlift": 405,
        "overheadPress1RM": 135,
        "ftp": 250,
        "fiveK_pace": "7:00/mi",
        "easyPace": "9:00/mi",
        "swimPace100": "1:45/100yd",
    }


@pytest.fixture
def strength_planned() -> Dict[str, Any]:
    """Planned strength session stored as a token preset."""
    return {
        "id": "planned-1",
        "name": "Upper A",
        "type": "strength",
        "date": "2026-03-07",
        "steps_preset": [
            "warmup_general_10min",
            "strength_bench_press_5x5_70pct",
            "strength_barbell_row_4x8_135lb",
            "strength_pull_ups_4x6",
            "cooldown_easy_5min",
        ],
    }


@pytest.fixture
def swim_planned() -> Dict[str, Any]:
    """Planned swim session with drills."""
    return {
        "id": "planned-swim",
        "name": "",
        "type": "swim",
        "tags": ["opt_kind:technique"],
        "steps_preset": [
            "swim_warmup_400yd",
            "swim_drill_catchup_4x50yd_r15",
            "swim_pull_4x100yd_r20",
            "swim_cooldown_200yd",
        ],
    }


@pytest.fixture
def description_planned() -> Dict[str, Any]:
    """Planned strength session stored only as free text."""
    return {
        "id": "planned-text",
        "type": "strength",
        "description": "Warm-Up: jog 5 min; Back Squat 3x5 — 225 lb; Cool Down: walk 5 min",
    }


# ---------------------------------------------------------------------------
# Backend Mock
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_supabase():
    """
    Mocked Supabase client returned by every get_supabase_client() caller.

    Chained query builders return the same mock, so tests configure the final
    `execute()` result only.
    """
    client = MagicMock()
    query = client.table.return_value
    for method in ("select", "eq", "single", "insert"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=[])

    with patch("workout_prefill_api.services.workout_service.get_supabase_client", return_value=client), \
            patch("workout_prefill_api.services.baseline_service.get_supabase_client", return_value=client):
        yield client
