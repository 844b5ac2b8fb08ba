from __future__ import annotations

import os
import time

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_event
from .auth.dependencies import current_user_id, require_admin, require_user
from .auth.models import LoginRequest
from .auth.users import authenticate
from .funnel.catalog import get_questions, list_categories
from .funnel.controller import FunnelController
from .funnel.errors import (
    InvalidAnswerError,
    QuestionNotActiveError,
    UnknownCategoryError,
)
from .funnel.models import AnswerRequest, FunnelSnapshot
from .funnel.store import SessionSlotStore
from .matching.cache import cache_get, cache_set, get_cache_stats, provider_fingerprint
from .matching.models import MatchResults
from .matching.scoring import rank_providers
from .providers.data_store import get_providers
from .sync.supabase_client import RemoteFunnelSync

app = FastAPI(title="Local Business Matching API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "bonita-funnel-secret-change-in-production"),
)

_remote_sync = RemoteFunnelSync()


def _load_controller(
    category: str,
    request: Request,
    background_tasks: BackgroundTasks,
) -> FunnelController:
    try:
        return FunnelController.load(
            category,
            SessionSlotStore(request.session),
            user_id=current_user_id(request),
            sync=_remote_sync,
            dispatch=background_tasks.add_task,
        )
    except UnknownCategoryError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/categories")
def categories() -> list[dict]:
    return [
        {**c.model_dump(), "questions": len(get_questions(c.key, {}))}
        for c in list_categories()
    ]


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    # Answer slots belong to the browser, not the account; keep them.
    request.session.pop("user", None)
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Funnel endpoints ─────────────────────────────────────────────────────


@app.get("/funnel/{category}", response_model=FunnelSnapshot)
def funnel_state(
    category: str,
    request: Request,
    background_tasks: BackgroundTasks,
) -> FunnelSnapshot:
    return _load_controller(category, request, background_tasks).snapshot()


@app.post("/funnel/{category}/answers", response_model=FunnelSnapshot)
def funnel_answer(
    category: str,
    body: AnswerRequest,
    request: Request,
    background_tasks: BackgroundTasks,
) -> FunnelSnapshot:
    controller = _load_controller(category, request, background_tasks)
    try:
        return controller.submit(body.question_id, body.option_id)
    except (QuestionNotActiveError, InvalidAnswerError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.delete("/funnel/{category}", response_model=FunnelSnapshot)
def funnel_reset(
    category: str,
    request: Request,
    background_tasks: BackgroundTasks,
) -> FunnelSnapshot:
    return _load_controller(category, request, background_tasks).reset()


@app.get("/funnel/{category}/results", response_model=MatchResults)
def funnel_results(
    category: str,
    request: Request,
    background_tasks: BackgroundTasks,
) -> MatchResults:
    start_time = time.time()
    controller = _load_controller(category, request, background_tasks)
    if not controller.is_complete:
        raise HTTPException(status_code=409, detail="Funnel is not complete")

    answers = controller.answers
    providers = get_providers(category)
    fingerprint = provider_fingerprint(providers)

    cached = cache_get(category, answers, fingerprint)
    if cached is not None:
        response = cached.model_copy(update={"cache_hit": True})
    else:
        response = MatchResults(
            category=category,
            answers=answers,
            summary=controller.summary(),
            results=rank_providers(category, answers, providers),
            total_candidates=len(providers),
        )
        cache_set(category, answers, fingerprint, response)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("results", {
        "category": category,
        "total_candidates": response.total_candidates,
        "results_returned": len(response.results),
        "response_time_ms": elapsed_ms,
        "cache_hit": response.cache_hit,
    })
    return response


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
