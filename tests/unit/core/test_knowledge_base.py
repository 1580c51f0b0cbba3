"""
Unit tests for knowledge base retrieval, coverage and auto-tagging.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.documents import Document

from mock_interviewer.ai.interview_flow import InterviewTopic
from mock_interviewer.core.knowledge_base import KnowledgeBase


def _topic(entry, senior=None, architect=None):
    return InterviewTopic(
        id="test",
        name="Test",
        description="",
        entry_level_focus=entry,
        senior_level_focus=senior or [],
        architect_level_focus=architect or [],
        estimated_minutes=1,
        incident_prompt="",
    )


class TestKnowledgeBase:
    """Test KnowledgeBase against a mocked vector store."""

    @pytest.fixture
    def store(self):
        return MagicMock()

    @pytest.fixture
    def kb(self, store):
        return KnowledgeBase(vector_store=store)

    @pytest.mark.asyncio
    async def test_retrieve_context_formats_sources(self, kb, store):
        store.asimilarity_search = AsyncMock(return_value=[
            Document(page_content="Deploy across multiple AZs."),
            Document(page_content="Automate recovery."),
        ])
        context = await kb.retrieve_context("high availability", "Senior")
        assert context == (
            "[SOURCE: AWS Well-Architected Framework]\nDeploy across multiple AZs.\n\n"
            "[SOURCE: AWS Well-Architected Framework]\nAutomate recovery."
        )
        store.asimilarity_search.assert_awaited_once_with("high availability", k=3)

    @pytest.mark.asyncio
    async def test_retrieve_context_empty_and_error(self, kb, store):
        store.asimilarity_search = AsyncMock(return_value=[])
        assert await kb.retrieve_context("anything") == ""
        store.asimilarity_search = AsyncMock(side_effect=RuntimeError("chroma down"))
        assert await kb.retrieve_context("anything") == ""

    @pytest.mark.asyncio
    async def test_search(self, kb, store):
        store.asimilarity_search_with_score = AsyncMock(
            return_value=[(Document(page_content="text", metadata={"source": "a.md"}), 0.42)]
        )
        assert await kb.search("query", k=1) == [
            {"content": "text", "metadata": {"source": "a.md"}, "score": 0.42}
        ]

    def test_add_documents_skips_failed_batches(self, kb, store):
        store.add_documents = MagicMock(side_effect=[None, RuntimeError("timeout"), None])
        documents = [Document(page_content=str(i)) for i in range(250)]
        assert kb.add_documents(documents, batch_size=100) == 150
        assert store.add_documents.call_count == 3

    @pytest.mark.asyncio
    async def test_check_coverage(self, kb, store):
        results = {
            "Pod Lifecycle": [(Document(page_content="", metadata={"id": "pod-lifecycle", "source": "pods.md"}), 1.5)],
            "Taints": [(Document(page_content="", metadata={"source": "taints.md"}), 0.5)],
            "Service Mesh": [(Document(page_content="", metadata={"source": "other.md"}), 1.1)],
        }

        async def fake_search(query, k):
            return results[query]

        store.asimilarity_search_with_score = AsyncMock(side_effect=fake_search)
        report = await kb.check_coverage([_topic(["Pod Lifecycle"], ["Taints"], ["Service Mesh"])])

        assert report["summary"] == {
            "total_topics": 3,
            "covered_topics": 2,
            "coverage_percent": 66.7,
            "breakdown": {"id_matches": 1, "semantic_matches": 1, "missing": 1},
        }
        assert [d["status"] for d in report["details"]] == ["id", "semantic", "missing"]
        assert report["details"][1]["best_match_file"] == "taints.md"

    @pytest.mark.asyncio
    async def test_check_coverage_records_errors(self, kb, store):
        store.asimilarity_search_with_score = AsyncMock(side_effect=RuntimeError("boom"))
        report = await kb.check_coverage([_topic(["Pod Lifecycle"])])
        assert report["details"][0]["status"] == "error"
        assert report["summary"]["covered_topics"] == 0

    @pytest.mark.asyncio
    async def test_auto_tag(self, kb, store, tmp_path):
        note = tmp_path / "pods.md"
        note.write_text("# Pods\n", encoding="utf-8")
        results = {
            "Pod Lifecycle": [(Document(page_content="", metadata={"file_path": str(note)}), 0.4)],
            "Taints": [(Document(page_content="", metadata={"file_path": str(note)}), 1.6)],
            "Service Mesh": [(Document(page_content="", metadata={"file_path": "relative/path.md"}), 0.3)],
        }

        async def fake_search(query, k):
            return results[query]

        store.asimilarity_search_with_score = AsyncMock(side_effect=fake_search)
        counts = await kb.auto_tag([_topic(["Pod Lifecycle"], ["Taints"], ["Service Mesh"])])

        assert counts == {"updated": 1, "skipped": 1, "no_match": 1}
        assert "id: pod-lifecycle" in note.read_text(encoding="utf-8")
