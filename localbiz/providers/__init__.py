"""
Provider supply.

Responsibilities:
- Normalise raw business-listing exports into the canonical provider CSV.
- Load the canonical dataset once and serve providers per category.
"""
