"""
Test fixtures for armpal-api.

Provides mock fixtures for the external collaborators (model API, Supabase
profile store) to enable fast, deterministic, offline testing.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
TESTS = ROOT / "tests"

# Make src/ importable so tests can do `import armpal_api...`
for p in (SRC, TESTS):
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from armpal_api.ai.client_factory import AIClientFactory
from armpal_api.config import settings
from armpal_api.main import app
from armpal_api.services.entitlement_service import EntitlementService
from factories import create_openai_response, make_card


TEST_USER_ID = "test-user-123"


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def openai_provider(monkeypatch):
    """Pin provider settings so the developer's environment cannot leak in."""
    monkeypatch.setattr(settings, "AI_PROVIDER", "openai")
    monkeypatch.setattr(settings, "CONVERTER_MODEL", "gpt-4o-mini")
    monkeypatch.delenv("BYPASS_TIER_GATE", raising=False)


# ---------------------------------------------------------------------------
# External collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_openai_client():
    """OpenAI client double returned by AIClientFactory.

    Set ``mock_openai_client.chat.completions.create.return_value`` (or use
    the ``model_returns`` fixture) to control the model's answer.
    """
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = create_openai_response('{"workouts": []}')
    with patch.object(AIClientFactory, "create_openai_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def model_returns(mock_openai_client):
    """Set the raw content the model returns; dicts are JSON-encoded."""
    def _set(content: Any):
        if isinstance(content, (dict, list)):
            content = json.dumps(content)
        mock_openai_client.chat.completions.create.return_value = create_openai_response(content)
        return mock_openai_client
    return _set


@pytest.fixture
def pro_user():
    """Entitlement lookup that grants Pro."""
    with patch.object(EntitlementService, "is_pro", return_value=True) as mock_is_pro:
        yield mock_is_pro


@pytest.fixture
def free_user():
    """Entitlement lookup that denies Pro."""
    with patch.object(EntitlementService, "is_pro", return_value=False) as mock_is_pro:
        yield mock_is_pro


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def three_cards() -> List[Dict[str, Any]]:
    return [
        make_card("Week 1 - Day 1", week_number=1, day_label="Day 1"),
        make_card("Week 1 - Day 2", week_number=1, day_label="Day 2"),
        make_card("Week 1 - Day 3", week_number=1, day_label="Day 3"),
    ]


@pytest.fixture
def scenario_a_output() -> Dict[str, Any]:
    """Model output for 'Bench Press 5x5\\nSquat 3x8-12'."""
    return {
        "workouts": [
            {
                "title": "Day 1",
                "week_number": None,
                "day_label": "Day 1",
                "exercises": [
                    {"name": "Bench Press", "sets": "5", "reps": "5", "percentage": "", "rpe": "", "notes": ""},
                    {"name": "Squat", "sets": "3", "reps": "8-12", "percentage": "", "rpe": "", "notes": ""},
                ],
            }
        ]
    }
