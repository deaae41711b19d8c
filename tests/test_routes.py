"""Endpoint tests through the FastAPI TestClient."""
from unittest.mock import MagicMock, patch

import pytest


# ---------------------------------------------------------------------------
# Version / health
# ---------------------------------------------------------------------------


def test_health(api_client):
    response = api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_version(api_client):
    response = api_client.get("/version")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "workout-prefill-api"
    assert data["version"] == "0.1.0"
    assert "build_timestamp" in data


# ---------------------------------------------------------------------------
# Prefill / parsing / summary
# ---------------------------------------------------------------------------


class TestPrefillEndpoint:
    """POST /prefill"""

    def test_bench_scenario(self, client):
        response = client.post(
            "/prefill",
            json={"planned": {"steps_preset": ["strength_bench_press_5x5_70pct"]}, "baselines": {"bench": 200}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "steps_preset"
        assert data["pendingAlternatives"] is None
        sets = data["exercises"][0]["sets"]
        assert [(s["reps"], s["weight"]) for s in sets] == [(5, 140)] * 5
        assert sets[0]["barType"] == "standard"

    def test_alternatives_serialized_by_alias(self, client):
        response = client.post(
            "/prefill",
            json={"planned": {"description": "Back Squat 3x5 @ 225 lb; Pull-Ups/Chin-Ups 4x6"}},
        )
        data = response.json()
        assert data["pendingAlternatives"]["combinedName"] == "Pull-Ups/Chin-Ups"
        assert data["pendingAlternatives"]["options"][0]["exerciseName"] == "Pull-Ups"

    def test_empty_planned(self, client):
        data = client.post("/prefill", json={}).json()
        assert [e["name"] for e in data["exercises"]] == [""]
        assert data["source"] == "empty"

    def test_baselines_looked_up_by_user(self, client):
        with patch(
            "workout_prefill_api.services.prefill.BaselineService.get_baseline",
            return_value={"bench": 200},
        ) as get_baseline:
            data = client.post(
                "/prefill",
                json={"planned": {"steps_preset": ["strength_bench_press_5x5_70pct"]}, "user_id": "user-1"},
            ).json()

        get_baseline.assert_called_once_with("user-1")
        assert data["exercises"][0]["sets"][0]["weight"] == 140


class TestParseEndpoints:
    """POST /parse/tokens and /parse/text"""

    def test_parse_tokens(self, client):
        response = client.post("/parse/tokens", json={"tokens": ["strength_bench_press_5x5_70pct", "not_a_token"]})
        assert response.status_code == 200
        steps = response.json()["steps"]
        assert len(steps) == 1
        assert steps[0]["exercise"] == "bench press"
        assert steps[0]["target"]["percent"] == 70

    def test_parse_text(self, client):
        response = client.post("/parse/text", json={"text": "Back Squat 3x5 @ 75%; Dips/Push-Ups 3x8-12"})
        data = response.json()
        assert data["steps"][0]["display_name"] == "Back Squat"
        assert data["alternatives"]["combinedName"] == "Dips/Push-Ups"

    def test_parse_text_without_alternatives(self, client):
        data = client.post("/parse/text", json={"text": "Back Squat 3x5"}).json()
        assert data["alternatives"] is None

    def test_parse_text_requires_text(self, client):
        assert client.post("/parse/text", json={}).status_code == 422


class TestSummaryEndpoint:
    def test_swim(self, client, swim_planned):
        response = client.post("/summary", json={"workout": swim_planned})
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Swim — Technique"
        assert data["swim_yards"] == 1200


class TestPlatesEndpoint:
    def test_plates(self, client):
        data = client.post("/plates", json={"weight": 225}).json()
        assert data["possible"] is True
        assert data["per_side"] == [{"weight": 45, "count": 2}]

    def test_negative_weight_rejected(self, client):
        assert client.post("/plates", json={"weight": -5}).status_code == 422


class TestExerciseSearchEndpoint:
    """GET /exercises/search"""

    def test_search(self, client):
        response = client.get("/exercises/search", params={"query": "squat", "limit": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "squat"
        assert data["results"] == ["Squat", "Back Squat", "Front Squat"]
        assert data["total"] == 3

    def test_default_limit(self, client):
        data = client.get("/exercises/search", params={"query": "e"}).json()
        assert data["total"] == 8

    def test_query_required(self, client):
        assert client.get("/exercises/search").status_code == 422

    def test_limit_bounds(self, client):
        assert client.get("/exercises/search", params={"query": "squat", "limit": 0}).status_code == 422


class TestTimerEndpoint:
    """POST /timer/parse"""

    @pytest.mark.parametrize(
        "value,seconds,display",
        [
            ("1:30", 90, "1:30"),
            ("130", 90, "1:30"),
            ("45s", 45, "0:45"),
            ("45:00", 1800, "30:00"),
        ],
    )
    def test_parse(self, client, value, seconds, display):
        response = client.post("/timer/parse", json={"value": value})
        assert response.status_code == 200
        assert response.json() == {"seconds": seconds, "display": display}

    def test_unrecognized_value(self, client):
        response = client.post("/timer/parse", json={"value": "abc"})
        assert response.status_code == 400
        assert "abc" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigationEndpoint:
    """POST /navigation/dispatch"""

    def test_valid_transition(self, client):
        response = client.post(
            "/navigation/dispatch",
            json={
                "state": "dashboard",
                "context": {"selected_date": "2026-03-07"},
                "command": {"type": "AddEffort", "effort_type": "log-strength"},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "strength_logger"
        assert data["context"]["selected_date"] == "2026-03-07"

    def test_invalid_transition(self, client):
        response = client.post(
            "/navigation/dispatch",
            json={"state": "dashboard", "command": {"type": "PlanSelected", "plan_id": "p"}},
        )
        assert response.status_code == 409
        assert "No transition" in response.json()["detail"]

    def test_unknown_command(self, client):
        response = client.post("/navigation/dispatch", json={"command": {"type": "Teleport"}})
        assert response.status_code == 400

    def test_bad_context(self, client):
        response = client.post(
            "/navigation/dispatch",
            json={"context": {"nope": 1}, "command": {"type": "BackToDashboard"}},
        )
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Completed workouts / snapshots
# ---------------------------------------------------------------------------


SESSION = {
    "exercises": [
        {"id": "ex-0-bench-press", "name": "Bench Press", "sets": [{"reps": 5, "weight": 135}]},
    ],
    "name": "Push Day",
    "date": "2026-03-07",
}


class TestSaveStrengthWorkout:
    """POST /workouts/strength"""

    def test_empty_session_rejected(self, client):
        response = client.post("/workouts/strength", json={"exercises": [{"id": "a", "name": ""}]})
        assert response.status_code == 422
        assert "at least one exercise" in response.json()["detail"].lower()

    def test_unconfigured_backend(self, client):
        response = client.post("/workouts/strength", json=SESSION)
        assert response.status_code == 502

    def test_saved(self, client, mock_supabase):
        mock_supabase.table.return_value.execute.return_value = MagicMock(data=[{"id": "w-1", "name": "Push Day"}])

        response = client.post("/workouts/strength", json=SESSION)

        assert response.status_code == 200
        assert response.json() == {"success": True, "workout": {"id": "w-1", "name": "Push Day"}}
        row = mock_supabase.table.return_value.insert.call_args[0][0]
        assert row["description"] == "Bench Press: 1/1 sets"


class TestSnapshots:
    """/snapshots/{key}"""

    def test_round_trip(self, client):
        assert client.get("/snapshots/session-1").status_code == 404

        response = client.put("/snapshots/session-1", json={"exercises": [], "notes": "left early"})
        assert response.json() == {"saved": True}
        assert client.get("/snapshots/session-1").json()["notes"] == "left early"

        assert client.delete("/snapshots/session-1").json() == {"cleared": True}
        assert client.get("/snapshots/session-1").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete("/snapshots/never-saved").status_code == 200
