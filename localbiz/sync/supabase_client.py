from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import DEFAULT_SYNC_CONFIG, SyncConfig

logger = logging.getLogger(__name__)


class RemoteFunnelSync:
    """
    Best-effort mirror of funnel answers in the ``funnel_responses`` table.

    Talks to the datastore's REST endpoint. Both operations return nothing
    and swallow every failure after logging it; no retry is attempted.
    """

    def __init__(
        self,
        config: SyncConfig = DEFAULT_SYNC_CONFIG,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self._client = client

    @property
    def enabled(self) -> bool:
        return self.config.enabled and bool(self.config.url) and bool(self.config.service_key)

    def _endpoint(self) -> str:
        return f"{self.config.url.rstrip('/')}/rest/v1/{self.config.table}"

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.config.service_key,
            "Authorization": f"Bearer {self.config.service_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            response = self._client.request(method, self._endpoint(), **kwargs)
        else:
            with httpx.Client(timeout=self.config.timeout) as client:
                response = client.request(method, self._endpoint(), **kwargs)
        response.raise_for_status()
        return response

    def persist(self, user_id: str, category: str, answers: dict[str, str]) -> None:
        if not self.enabled or not user_id or not answers:
            return
        try:
            self._send(
                "POST",
                params={"on_conflict": f"{self.config.user_column},category"},
                json={self.config.user_column: user_id, "category": category, "answers": answers},
                headers=self._headers("resolution=merge-duplicates,return=minimal"),
            )
        except Exception:
            logger.warning("Failed to persist funnel answers for %s/%s", user_id, category, exc_info=True)

    def clear(self, user_id: str, category: str) -> None:
        if not self.enabled or not user_id:
            return
        try:
            self._send(
                "DELETE",
                params={self.config.user_column: f"eq.{user_id}", "category": f"eq.{category}"},
                headers=self._headers(),
            )
        except Exception:
            logger.warning("Failed to clear funnel answers for %s/%s", user_id, category, exc_info=True)
