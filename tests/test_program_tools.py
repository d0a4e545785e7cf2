"""Tests for the program authoring endpoints (parse / enrich / modify)."""
import json
from unittest.mock import patch

import pytest

from armpal_api.services.program_tools import MODIFICATIONS, normalize_metadata

PROGRAM_LAYOUT = {
    "frequency_range": [3, 4],
    "layouts": {
        "3": {
            "summary": "Full body",
            "days": [
                {"name": "Day A", "exercises": [{"name": "Bench Press", "sets": "5", "reps": "5", "intensity": "80%"}]}
            ],
        }
    },
}


class TestParseProgram:

    @pytest.mark.parametrize("body", [{}, {"rawContent": ""}, {"rawContent": 123}])
    def test_missing_raw_content(self, client, mock_openai_client, body):
        resp = client.post("/api/parseProgram", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing rawContent"}
        mock_openai_client.chat.completions.create.assert_not_called()

    def test_returns_model_layout(self, client, model_returns):
        mock_client = model_returns(PROGRAM_LAYOUT)

        resp = client.post("/api/parseProgram", json={"rawContent": "Day A: Bench 5x5 @80%"})

        assert resp.status_code == 200
        assert resp.json() == PROGRAM_LAYOUT
        messages = mock_client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[1]["content"] == "Day A: Bench 5x5 @80%"

    def test_empty_model_response(self, client, model_returns):
        model_returns("")
        resp = client.post("/api/parseProgram", json={"rawContent": "Bench 5x5"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Empty response from AI"}

    def test_invalid_model_json(self, client, model_returns):
        model_returns("not json")
        resp = client.post("/api/parseProgram", json={"rawContent": "Bench 5x5"})
        assert resp.status_code == 500
        assert resp.json()["error"].startswith("Expecting value")


class TestEnrichProgram:

    def test_metadata_is_normalized(self, client, model_returns):
        model_returns({
            "description": " Heavy hook program. ",
            "difficulty": "Advanced",
            "tags": ["Hook", "Cardio", "Strength", "Hook", "Hypertrophy", "Toproll", "Powerlifting"],
            "thumbnail_style": "armwrestling_hook",
        })

        resp = client.post(
            "/api/enrichProgram",
            json={"rawContent": "Hook day...", "parsedProgram": PROGRAM_LAYOUT},
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "description": "Heavy hook program.",
            "difficulty": "Advanced",
            "tags": ["Hook", "Strength", "Hypertrophy", "Toproll"],
            "thumbnail_style": "armwrestling_hook",
        }

    def test_parsed_program_sent_as_json(self, client, model_returns):
        mock_client = model_returns({"description": "x"})
        client.post("/api/enrichProgram", json={"rawContent": "raw", "parsedProgram": PROGRAM_LAYOUT})
        user_turn = mock_client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert user_turn.startswith("Raw content:\nraw")
        assert json.dumps(PROGRAM_LAYOUT, indent=2) in user_turn

    def test_unknown_values_dropped(self):
        assert normalize_metadata({"difficulty": "Godlike", "tags": "Hook", "thumbnail_style": "neon"}) == {
            "description": "",
            "difficulty": None,
            "tags": ["Hook"],
            "thumbnail_style": None,
        }


class TestModifyProgram:

    @pytest.mark.parametrize(
        "body",
        [
            {"modification": "beginner"},
            {"baseProgram": PROGRAM_LAYOUT},
            {"baseProgram": PROGRAM_LAYOUT, "modification": "cardio"},
        ],
    )
    def test_invalid_request(self, client, mock_openai_client, body):
        resp = client.post("/api/modifyProgram", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing baseProgram or invalid modification"}
        mock_openai_client.chat.completions.create.assert_not_called()

    @pytest.mark.parametrize("modification", sorted(MODIFICATIONS))
    def test_uses_preset_instruction(self, client, model_returns, modification):
        mock_client = model_returns(PROGRAM_LAYOUT)

        resp = client.post(
            "/api/modifyProgram",
            json={"baseProgram": PROGRAM_LAYOUT, "modification": modification},
        )

        assert resp.status_code == 200
        messages = mock_client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0]["content"] == MODIFICATIONS[modification]
        assert mock_client.chat.completions.create.call_count == 1


class TestUpstreamFailures:
    """A failed model call reports the failing tool, not the converter."""

    @pytest.mark.parametrize(
        "path,body,label",
        [
            ("/api/parseProgram", {"rawContent": "Bench 5x5"}, "Failed to parse program"),
            ("/api/enrichProgram", {"rawContent": "Bench 5x5", "parsedProgram": PROGRAM_LAYOUT}, "Failed to enrich program"),
            ("/api/modifyProgram", {"baseProgram": PROGRAM_LAYOUT, "modification": "beginner"}, "Failed to modify program"),
        ],
    )
    def test_model_api_failure_uses_tool_label(self, client, mock_openai_client, path, body, label):
        mock_openai_client.chat.completions.create.side_effect = RuntimeError("upstream down")

        resp = client.post(path, json=body)

        assert resp.status_code == 500
        assert resp.json() == {"error": label, "message": "upstream down"}
        assert mock_openai_client.chat.completions.create.call_count == 1

    def test_unexpected_error_uses_tool_label(self, client, model_returns):
        model_returns({"description": "x"})
        with patch(
            "armpal_api.services.program_tools.normalize_metadata",
            side_effect=ValueError("bad metadata"),
        ):
            resp = client.post("/api/enrichProgram", json={"rawContent": "raw"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to enrich program", "message": "bad metadata"}
