"""
LLM-backed tools: JD parsing and gap analysis, interview scoring and the
topic feedback pipeline.
"""
