"""
FastAPI routers for the Mock Interviewer.

This module contains FastAPI routers for organizing API endpoints
into logical groups.
"""

from . import chat_completions, interviews, knowledge_base

__all__ = ["chat_completions", "interviews", "knowledge_base"]
