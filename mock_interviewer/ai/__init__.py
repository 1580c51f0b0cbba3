"""
Interview content: topic catalog, packs, question bank, expert scenarios
and prompt templates.
"""
