"""
Funnel controller.

Owns one category's answer set for one session and walks it through the
question catalog. States:

* ``not_started``: no answers recorded.
* ``in_progress``: the catalog still yields an unanswered question; ``step``
  is its index in the current sequence.
* ``complete``: every question the catalog yields for the current answers
  has been answered.

Every transition writes the answer set to the durable slot before returning.
Authenticated sessions also hand a copy of the answers to the remote sync
collaborator through ``dispatch`` (a background thread pool unless the host supplies
its own scheduler); that call is fire-and-forget and any failure is logged
and dropped.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol

from ..analytics.store import record_event
from .catalog import (
    find_question,
    first_unanswered,
    get_category,
    get_questions,
    reachable_question_ids,
)
from .errors import InvalidAnswerError, QuestionNotActiveError
from .models import FunnelSnapshot, FunnelStatus, SummaryItem
from .store import SlotStore

logger = logging.getLogger(__name__)

Dispatch = Callable[..., Any]


class RemoteSync(Protocol):
    def persist(self, user_id: str, category: str, answers: dict[str, str]) -> None: ...

    def clear(self, user_id: str, category: str) -> None: ...


# Remote sync never runs on the caller's thread.
_sync_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="funnel-sync")


def _submit_background(fn: Callable[..., Any], *args: Any) -> None:
    _sync_executor.submit(fn, *args)


def _quietly(fn: Callable[..., Any], *args: Any) -> None:
    try:
        fn(*args)
    except Exception:
        logger.warning("Remote funnel sync failed", exc_info=True)


def stale_reason(category: str, answers: dict[str, str]) -> str | None:
    """Explain why a saved answer set cannot be resumed, or ``None`` if it can."""
    orphaned = set(answers) - reachable_question_ids(category)
    if orphaned:
        return f"orphaned answers {sorted(orphaned)}"

    for qid, value in answers.items():
        question = find_question(category, qid)
        if question is None or value not in question.option_ids():
            return f"retired option {value!r} for {qid!r}"

    active = {q.id for q in get_questions(category, answers)}
    unreachable = set(answers) - active
    if unreachable:
        return f"answers outside the active sequence {sorted(unreachable)}"
    return None


class FunnelController:
    def __init__(
        self,
        category: str,
        store: SlotStore,
        user_id: str | None = None,
        sync: RemoteSync | None = None,
        dispatch: Dispatch | None = None,
    ) -> None:
        get_category(category)
        self.category = category
        self._store = store
        self._user_id = user_id
        self._sync = sync
        self._dispatch = dispatch or _submit_background
        self._answers: dict[str, str] = {}

    @classmethod
    def load(
        cls,
        category: str,
        store: SlotStore,
        user_id: str | None = None,
        sync: RemoteSync | None = None,
        dispatch: Dispatch | None = None,
    ) -> FunnelController:
        """Restore a controller from the category's slot."""
        controller = cls(category, store, user_id=user_id, sync=sync, dispatch=dispatch)
        saved = store.read(category)
        if not saved:
            return controller

        reason = stale_reason(category, saved)
        if reason:
            # All-or-nothing: never repair a partially valid answer set.
            logger.info("Discarding stale answers for %s: %s", category, reason)
            store.clear(category)
            controller._schedule_remote_clear()
            record_event("funnel_stale_reset", {"category": category, "reason": reason})
            return controller

        controller._answers = saved
        return controller

    # ── Read side ───────────────────────────────────────────────────────

    @property
    def answers(self) -> dict[str, str]:
        return dict(self._answers)

    @property
    def status(self) -> FunnelStatus:
        if not self._answers:
            return FunnelStatus.not_started
        questions = get_questions(self.category, self._answers)
        if first_unanswered(questions, self._answers) is None:
            return FunnelStatus.complete
        return FunnelStatus.in_progress

    @property
    def is_complete(self) -> bool:
        return self.status is FunnelStatus.complete

    def snapshot(self) -> FunnelSnapshot:
        questions = get_questions(self.category, self._answers)
        gap = first_unanswered(questions, self._answers)
        return FunnelSnapshot(
            category=self.category,
            status=self.status,
            step=gap if gap is not None else len(questions),
            total=len(questions),
            current_question=questions[gap] if gap is not None else None,
            questions=questions,
            answers=dict(self._answers),
        )

    def summary(self) -> list[SummaryItem]:
        items: list[SummaryItem] = []
        for q in get_questions(self.category, self._answers):
            chosen = self._answers.get(q.id)
            items.append(SummaryItem(
                question_id=q.id,
                prompt=q.prompt,
                answer=(q.label_for(chosen) if chosen else None) or "-",
            ))
        return items

    # ── Transitions ─────────────────────────────────────────────────────

    def submit(self, question_id: str, option_id: str) -> FunnelSnapshot:
        """Record an answer, or edit an earlier one, and advance."""
        questions = get_questions(self.category, self._answers)
        ids = [q.id for q in questions]
        if question_id not in ids:
            raise QuestionNotActiveError(
                f"Question {question_id!r} is not active for {self.category}"
            )
        position = ids.index(question_id)
        gap = first_unanswered(questions, self._answers)
        if gap is not None and position > gap:
            raise QuestionNotActiveError(
                f"Question {question_id!r} comes after unanswered {ids[gap]!r}"
            )
        question = questions[position]
        if option_id not in question.option_ids():
            raise InvalidAnswerError(
                f"{option_id!r} is not an option of {question_id!r}"
            )

        was_complete = self.is_complete
        previous = self._answers.get(question_id)
        if previous is not None and previous != option_id:
            # Downstream answers may rest on the old value; re-ask all of them.
            discarded = [qid for qid in ids[position:] if qid in self._answers]
            for qid in discarded:
                del self._answers[qid]
            logger.info(
                "Edited %s/%s, discarded %d later answers",
                self.category, question_id, len(discarded),
            )
        self._answers[question_id] = option_id
        self._drop_inactive()
        self._persist()

        record_event("funnel_answer", {
            "category": self.category,
            "question_id": question_id,
            "step": position,
            "option_id": option_id,
            "edited": previous is not None and previous != option_id,
        })
        if self.is_complete and not was_complete:
            record_event("funnel_complete", {
                "category": self.category,
                "answers": dict(self._answers),
            })
        return self.snapshot()

    def reset(self) -> FunnelSnapshot:
        self._answers = {}
        self._store.clear(self.category)
        self._schedule_remote_clear()
        logger.info("Funnel reset for %s", self.category)
        record_event("funnel_reset", {"category": self.category})
        return self.snapshot()

    # ── Internals ───────────────────────────────────────────────────────

    def _drop_inactive(self) -> None:
        active = {q.id for q in get_questions(self.category, self._answers)}
        for qid in [k for k in self._answers if k not in active]:
            logger.debug("Dropping answer to hidden question %s/%s", self.category, qid)
            del self._answers[qid]

    def _persist(self) -> None:
        self._store.write(self.category, self._answers)
        if self._user_id and self._sync is not None and self._answers:
            self._dispatch(
                _quietly, self._sync.persist, self._user_id, self.category, dict(self._answers),
            )

    def _schedule_remote_clear(self) -> None:
        if self._user_id and self._sync is not None:
            self._dispatch(_quietly, self._sync.clear, self._user_id, self.category)
