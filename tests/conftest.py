"""
Shared fixtures for the unit tests.
"""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage


@pytest.fixture
def fake_llm():
    """Build a chat model double whose ``ainvoke`` returns the given content."""
    def _build(content):
        if isinstance(content, (dict, list)):
            content = json.dumps(content)
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content=content))
        return llm
    return _build


@pytest.fixture
def mock_database():
    """A pymongo Database double with one MagicMock per collection name."""
    collections = {}

    def _collection(name):
        if name not in collections:
            collections[name] = MagicMock(name=name)
        return collections[name]

    database = MagicMock()
    database.name = "mock_interviewer_test"
    database.__getitem__.side_effect = _collection
    return database


@pytest.fixture
def analysed_state_json():
    return {
        "phase": "topics",
        "currentTopic": "kubernetes",
        "topicsCovered": [],
        "questionDepth": 1,
        "candidateLevel": "senior",
        "nextAction": {
            "action": "drill_down",
            "topic": "kubernetes",
            "questionType": "deep_dive",
            "ragQuery": "EKS ingress 502 troubleshooting",
        },
        "candidateProfile": {
            "skills": ["EKS", "Terraform"],
            "experienceYears": 6,
            "technologies": ["kubernetes", "terraform", "aws"],
        },
    }
