"""
Knowledge base backed by a Chroma server.

Holds the interviewer reference material (AWS Well-Architected pillars and
per-topic reference notes). The chat flow pulls a few chunks per turn so the
interviewer can fact-check answers against them.
"""
import os
import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

import chromadb
from langchain_chroma import Chroma
from langchain_core.documents import Document
from langchain_core.vectorstores import VectorStore
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from mock_interviewer.ai.interview_flow import INTERVIEW_TOPICS, InterviewTopic
from mock_interviewer.core.knowledge_ingest import slugify, tag_file_with_id
from mock_interviewer.utils.config import get_vector_store_config
from mock_interviewer.utils.constants import (
    AUTO_TAG_THRESHOLD,
    INGEST_BATCH_SIZE,
    RAG_SEMANTIC_MATCH_THRESHOLD,
    RAG_SOURCE_LABEL,
    RAG_TOP_K,
)
from mock_interviewer.utils.profiling import timer

logger = logging.getLogger(__name__)

_vector_store: Optional[VectorStore] = None


def _chroma_client(url: str) -> "chromadb.ClientAPI":
    parsed = urlparse(url)
    return chromadb.HttpClient(
        host=parsed.hostname or "localhost",
        port=parsed.port or (443 if parsed.scheme == "https" else 8000),
        ssl=parsed.scheme == "https",
    )


def get_vector_store() -> VectorStore:
    """
    Return the process-wide Chroma vector store, creating it on first use.

    Returns:
        Chroma store connected to CHROMA_DB_URL
    """
    global _vector_store
    if _vector_store is None:
        config = get_vector_store_config()
        embeddings = GoogleGenerativeAIEmbeddings(model=config["embedding_model"])
        _vector_store = Chroma(
            collection_name=config["collection_name"],
            embedding_function=embeddings,
            client=_chroma_client(config["url"]),
        )
        logger.info(f"Connected to Chroma collection '{config['collection_name']}' at {config['url']}")
    return _vector_store


class KnowledgeBase:
    """Retrieval over the interviewer knowledge base."""

    def __init__(self, vector_store: Optional[VectorStore] = None):
        self._vector_store = vector_store

    @property
    def vector_store(self) -> VectorStore:
        if self._vector_store is None:
            self._vector_store = get_vector_store()
        return self._vector_store

    def add_documents(self, documents: List[Document], batch_size: int = INGEST_BATCH_SIZE) -> int:
        """
        Add documents in batches.

        Failed batches are logged and skipped.

        Returns:
            Number of documents stored
        """
        added = 0
        total_batches = (len(documents) + batch_size - 1) // batch_size
        for start in range(0, len(documents), batch_size):
            batch = documents[start:start + batch_size]
            batch_number = start // batch_size + 1
            try:
                with timer(f"add_documents batch {batch_number}", logging.INFO):
                    self.vector_store.add_documents(batch)
                added += len(batch)
                logger.info(f"Ingested batch {batch_number}/{total_batches} ({len(batch)} chunks)")
            except Exception as e:
                logger.error(f"Error ingesting batch {batch_number}: {e}")
        return added

    async def search(self, query: str, k: int = RAG_TOP_K) -> List[Dict[str, Any]]:
        """
        Similarity search returning content, metadata and distance score.

        Returns:
            List of matches, empty on error
        """
        try:
            results = await self.vector_store.asimilarity_search_with_score(query, k=k)
        except Exception as e:
            logger.error(f"Error searching knowledge base: {e}")
            return []
        return [
            {"content": doc.page_content, "metadata": doc.metadata, "score": score}
            for doc, score in results
        ]

    async def retrieve_context(self, query: str, role_level: str = "Mid") -> str:
        """
        Retrieve reference context for a query.

        Args:
            query: Search text, usually the state manager's RAG query
            role_level: Candidate level (not used for filtering yet)

        Returns:
            Source-tagged chunks joined by blank lines, or "" when nothing is found
        """
        try:
            with timer("retrieve_context"):
                docs = await self.vector_store.asimilarity_search(query, k=RAG_TOP_K)
        except Exception as e:
            logger.error(f"Error retrieving context: {e}")
            return ""

        if not docs:
            return ""
        logger.debug(f"Retrieved {len(docs)} context chunks for level {role_level}")
        return "\n\n".join(f"[SOURCE: {RAG_SOURCE_LABEL}]\n{doc.page_content}" for doc in docs)

    async def check_coverage(self, topics: Optional[Iterable[InterviewTopic]] = None) -> Dict[str, Any]:
        """
        Check how well the knowledge base covers every topic focus item.

        An item is covered by an ``id`` match (the best hit carries the item's
        slug as ``metadata.id``) or a ``semantic`` match (distance below the
        threshold).

        Returns:
            Dictionary with ``summary`` and per-item ``details``
        """
        items: List[str] = []
        for topic in topics if topics is not None else INTERVIEW_TOPICS:
            items.extend(topic.all_focus_items())

        details = []
        id_matches = 0
        semantic_matches = 0
        for item in items:
            slug = slugify(item)
            try:
                results = await self.vector_store.asimilarity_search_with_score(item, k=1)
            except Exception as e:
                logger.error(f"Error checking topic {item}: {e}")
                details.append({"topic": item, "slug": slug, "status": "error", "error": str(e)})
                continue

            status = "missing"
            score = 2.0
            best_match = "none"
            if results:
                doc, score = results[0]
                best_match = doc.metadata.get("source", "unknown")
                if doc.metadata.get("id") == slug:
                    status = "id"
                    id_matches += 1
                elif score < RAG_SEMANTIC_MATCH_THRESHOLD:
                    status = "semantic"
                    semantic_matches += 1

            details.append({
                "topic": item,
                "slug": slug,
                "status": status,
                "score": round(float(score), 2),
                "best_match_file": best_match,
            })

        total = len(items)
        covered = id_matches + semantic_matches
        return {
            "summary": {
                "total_topics": total,
                "covered_topics": covered,
                "coverage_percent": round(covered / total * 100, 1) if total else 0.0,
                "breakdown": {
                    "id_matches": id_matches,
                    "semantic_matches": semantic_matches,
                    "missing": total - covered,
                },
            },
            "details": details,
        }

    async def auto_tag(self, topics: Optional[Iterable[InterviewTopic]] = None,
                       threshold: float = AUTO_TAG_THRESHOLD) -> Dict[str, int]:
        """
        Tag the best matching source file of each focus item with the item's slug.

        Only the first item mapped to a file sets its id; later items fall back
        to semantic matching.

        Returns:
            Counts of ``updated``, ``skipped`` and ``no_match`` items
        """
        counts = {"updated": 0, "skipped": 0, "no_match": 0}
        for topic in topics if topics is not None else INTERVIEW_TOPICS:
            for item in topic.all_focus_items():
                results = await self.search(item, k=1)
                if not results or results[0]["score"] > threshold:
                    logger.info(f"Weak or no match for '{item}', skipping")
                    counts["no_match"] += 1
                    continue

                file_path = results[0]["metadata"].get("file_path")
                if not file_path or not os.path.isabs(str(file_path)):
                    logger.warning(f"Invalid file path in metadata for '{item}': {file_path}")
                    counts["skipped"] += 1
                    continue

                try:
                    action = tag_file_with_id(file_path, slugify(item))
                except OSError as e:
                    logger.error(f"Error tagging {file_path}: {e}")
                    counts["skipped"] += 1
                    continue

                if action:
                    logger.info(f"Tagged '{item}' -> {file_path} (score {results[0]['score']:.2f})")
                    counts["updated"] += 1
                else:
                    counts["skipped"] += 1
        return counts
