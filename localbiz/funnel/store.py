"""
Durable per-category answer slots.

A slot holds one category's answers as a flat ``{question_id: option_id}``
object, either as the object itself or as its JSON text. Anything that does
not parse into that shape is treated as if the slot were empty.
"""
from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import Any

logger = logging.getLogger(__name__)

SLOT_PREFIX = "bf-tracking-"


def slot_key(category: str) -> str:
    return f"{SLOT_PREFIX}{category}"


def parse_answer_set(raw: Any) -> dict[str, str] | None:
    """Return the stored answers, or ``None`` when absent or malformed."""
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (TypeError, ValueError):
            return None
    if not isinstance(raw, dict):
        return None
    answers: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, str):
            return None
        if not key or not value:
            return None
        answers[key] = value
    return answers


class SlotStore:
    """Read/write access to the per-category answer slots."""

    def _get_raw(self, key: str) -> Any:
        raise NotImplementedError

    def _set_raw(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _delete_raw(self, key: str) -> None:
        raise NotImplementedError

    def read(self, category: str) -> dict[str, str] | None:
        raw = self._get_raw(slot_key(category))
        answers = parse_answer_set(raw)
        if raw is not None and answers is None:
            logger.info("Ignoring malformed answer slot for %s", category)
        return answers

    def write(self, category: str, answers: dict[str, str]) -> None:
        self._set_raw(slot_key(category), dict(answers))

    def clear(self, category: str) -> None:
        self._delete_raw(slot_key(category))


class MemorySlotStore(SlotStore):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.slots: dict[str, Any] = dict(initial or {})

    def _get_raw(self, key: str) -> Any:
        return self.slots.get(key)

    def _set_raw(self, key: str, value: Any) -> None:
        self.slots[key] = value

    def _delete_raw(self, key: str) -> None:
        self.slots.pop(key, None)


class SessionSlotStore(SlotStore):
    """Slots kept in the signed session cookie of the current request."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def _get_raw(self, key: str) -> Any:
        return self._session.get(key)

    def _set_raw(self, key: str, value: Any) -> None:
        self._session[key] = value

    def _delete_raw(self, key: str) -> None:
        self._session.pop(key, None)
