"""
Session services: persistence, question tracking, progress and the interview
lifecycle (start, finish, call reports).
"""
