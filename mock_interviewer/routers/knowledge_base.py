"""
FastAPI router for knowledge base inspection.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from mock_interviewer.core.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/knowledge-base", tags=["knowledge-base"])


def get_knowledge_base(request: Request) -> KnowledgeBase:
    kb = getattr(request.app.state, "knowledge_base", None)
    if kb is None:
        raise HTTPException(status_code=500, detail="Knowledge base not initialized")
    return kb


@router.get("/coverage")
async def knowledge_base_coverage(request: Request):
    """Report which interview focus items the knowledge base covers."""
    kb = get_knowledge_base(request)
    try:
        return await kb.check_coverage()
    except Exception as e:
        logger.error(f"Error checking knowledge base coverage: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to check coverage: {str(e)}")


@router.get("/search")
async def knowledge_base_search(request: Request, q: str = Query(..., min_length=1), level: str = "Mid"):
    """Return the context the interviewer would receive for a query."""
    kb = get_knowledge_base(request)
    context = await kb.retrieve_context(q, level)
    return {"query": q, "context": context, "found": bool(context)}
