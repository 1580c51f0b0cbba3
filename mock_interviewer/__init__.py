"""
Mock Interviewer Package.

This package runs AI-driven mock DevOps and cloud interviews: prompt assembly,
per-turn state analysis, knowledge-base retrieval and scoring.
"""

__version__ = "0.1.0"
