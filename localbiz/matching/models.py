from __future__ import annotations

from pydantic import BaseModel, Field

from ..funnel.models import SummaryItem
from ..providers.models import Provider


class ScoredProvider(BaseModel):
    provider: Provider
    score: float


class MatchResults(BaseModel):
    category: str
    answers: dict[str, str]
    summary: list[SummaryItem] = Field(default_factory=list)
    results: list[ScoredProvider]
    total_candidates: int
    cache_hit: bool = False
