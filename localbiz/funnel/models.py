from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FunnelOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str
    options: tuple[FunnelOption, ...]
    # question_id -> allowed option ids; every entry must hold
    show_if: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def option_ids(self) -> list[str]:
        return [o.id for o in self.options]

    def label_for(self, option_id: str) -> str | None:
        for o in self.options:
            if o.id == option_id:
                return o.label
        return None

    def is_shown(self, answers: dict[str, str], active_ids: set[str]) -> bool:
        """Evaluate the dependency against answers of already-active questions."""
        for qid, allowed in self.show_if.items():
            if qid not in active_ids:
                return False
            if answers.get(qid) not in allowed:
                return False
        return True


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str


class FunnelStatus(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    complete = "complete"


class FunnelSnapshot(BaseModel):
    category: str
    status: FunnelStatus
    step: int
    total: int
    current_question: Question | None = None
    questions: list[Question] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)


class AnswerRequest(BaseModel):
    question_id: str = Field(..., min_length=1)
    option_id: str = Field(..., min_length=1)


class SummaryItem(BaseModel):
    question_id: str
    prompt: str
    answer: str
