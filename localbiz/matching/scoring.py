from __future__ import annotations

import re

from ..funnel.catalog import get_category, get_questions, is_complete
from ..funnel.errors import CategoryMismatchError, IncompleteAnswerSetError
from ..providers.models import Provider
from .models import ScoredProvider
from .profiles import SYNONYM_CREDIT, WILDCARD_ANSWERS, ScoringProfile, get_profile


def _term_in(term: str, text: str) -> bool:
    """True when ``term`` appears in ``text`` bounded by whitespace or the ends of ``text``."""
    return re.search(rf"(?<!\S){re.escape(term)}(?!\S)", text) is not None


def _match_strength(
    provider_terms: list[str],
    answer: str,
    synonyms: tuple[str, ...],
) -> float:
    """1.0 when the answer is a tag or a term of one, SYNONYM_CREDIT for a synonym, else 0."""
    if any(_term_in(answer, term) for term in provider_terms):
        return 1.0
    for syn in synonyms:
        if any(_term_in(syn, term) for term in provider_terms):
            return SYNONYM_CREDIT
    return 0.0


def _score_provider(
    provider: Provider,
    answers: dict[str, str],
    profile: ScoringProfile,
) -> float:
    terms = [t.strip().lower() for t in provider.tags + provider.specialties if t.strip()]
    score = 0.0
    for qid, weight in profile.weights.items():
        answer = answers.get(qid)
        if not answer or answer in WILDCARD_ANSWERS:
            continue
        score += weight * _match_strength(terms, answer, profile.synonyms_for(qid, answer))
    return score


def rank_providers(
    category: str,
    answers: dict[str, str],
    providers: list[Provider],
) -> list[ScoredProvider]:
    """
    Filter, score and order ``providers`` for a completed funnel.

    Ordering is total and reproducible: score descending, then featured
    providers first, then providers with a rating, then input order.
    """
    get_category(category)
    if not is_complete(category, answers):
        raise IncompleteAnswerSetError(f"Answers for {category} are not complete")
    for p in providers:
        if p.category_key != category:
            raise CategoryMismatchError(
                f"Provider {p.id} belongs to {p.category_key}, not {category}"
            )

    # Only answers to questions in the active sequence take part.
    active = {q.id: answers[q.id] for q in get_questions(category, answers)}
    profile = get_profile(category)

    scored: list[tuple[float, int, Provider]] = []
    for index, p in enumerate(providers):
        if any(c.excludes(p, active) for c in profile.hard_constraints):
            continue
        scored.append((_score_provider(p, active, profile), index, p))

    scored.sort(key=lambda s: (-s[0], not s[2].featured, not s[2].has_rating, s[1]))
    return [ScoredProvider(provider=p, score=round(score, 4)) for score, _, p in scored]


def score_providers(
    category: str,
    answers: dict[str, str],
    providers: list[Provider],
) -> list[Provider]:
    """Ordered providers for a completed funnel; empty when nothing survives the filters."""
    return [s.provider for s in rank_providers(category, answers, providers)]
