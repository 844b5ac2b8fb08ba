from __future__ import annotations


class FunnelError(Exception):
    """Base class for funnel errors surfaced to API callers."""


class UnknownCategoryError(FunnelError, KeyError):
    def __init__(self, category: str) -> None:
        super().__init__(category)
        self.category = category

    def __str__(self) -> str:
        return f"Unknown category: {self.category}"


class QuestionNotActiveError(FunnelError, ValueError):
    """The question is not part of the sequence for the current answers."""


class InvalidAnswerError(FunnelError, ValueError):
    """The chosen option is not one of the question's options."""


class IncompleteAnswerSetError(FunnelError, ValueError):
    """Scoring was requested before the funnel reached ``complete``."""


class CategoryMismatchError(FunnelError, ValueError):
    """A provider handed to scoring belongs to another category."""
