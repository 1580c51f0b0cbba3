"""
Prompt templates and prompt builders for the Mock Interviewer.
"""
