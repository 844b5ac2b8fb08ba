"""
Provider matching.

Responsibilities:
- Drop providers that fail a category's hard constraints.
- Score the rest by weighted overlap with the funnel answers.
- Order deterministically: score, then featured, then rated, then input order.
"""
