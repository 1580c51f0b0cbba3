"""
Fixtures for the API tests.

The client is created without entering the lifespan so no MongoDB or Chroma
connection is made; the repository and knowledge base are set directly on
the app state.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from mock_interviewer.server import app


@pytest.fixture
def session():
    return {
        "session_id": "s1",
        "user_id": "user-1",
        "pack_id": "devops-senior",
        "status": "IN_PROGRESS",
        "is_practice": False,
        "user_skills": [],
        "system_prompt": "BASE PROMPT",
    }


@pytest.fixture
def repo(session):
    repo = MagicMock()
    repo.get_session.return_value = session
    repo.get_turns.return_value = []
    return repo


@pytest.fixture
def kb():
    kb = MagicMock()
    kb.retrieve_context = AsyncMock(return_value="[SOURCE: AWS Well-Architected Framework]\nUse multiple AZs.")
    return kb


@pytest.fixture
def client(repo, kb):
    app.state.repository = repo
    app.state.knowledge_base = kb
    yield TestClient(app)
    app.state.repository = None
    app.state.knowledge_base = None
