"""
Provider matching funnel.

Responsibilities:
- Define the per-category questionnaires and their conditional follow-ups.
- Persist a user's answers per category and detect stale answer sets.
- Walk the user through the questionnaire one question at a time.
"""
