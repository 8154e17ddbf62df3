"""Video hosting endpoints: on-demand fetch, index lookup and status."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from skyflix.application.use_cases import parse_video_request
from skyflix.application.use_cases.video_resolve import servers_from_entries
from skyflix.domain.entities.video import InvalidVideoRequest, VideoAggregate
from skyflix.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/videohosting", tags=["videohosting"])


def _bad_request(exc: InvalidVideoRequest) -> JSONResponse:
    content: dict[str, Any] = {"error": str(exc)}
    if exc.required:
        content["required"] = exc.required
    return JSONResponse(status_code=400, content=content)


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@router.post("/fetch")
async def fetch_video(request: Request) -> JSONResponse:
    """Resolve embed/download links for one title across all hosts.

    Body: ``{title, type, year?, season?, episode?}``. Invalid requests are
    rejected with 400 before any host is contacted.
    """
    state = cast(AppState, request.app.state)
    try:
        video_request = parse_video_request(await _json_body(request))
    except InvalidVideoRequest as e:
        log.info("video_fetch_rejected", reason=str(e))
        return _bad_request(e)

    aggregate = await state.video_resolve_uc.execute(video_request)
    return JSONResponse(content=aggregate.to_dict())


@router.get("/status")
async def hosting_status(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    hosts = state.config.hosting.hosts
    return JSONResponse(
        content={
            "status": {
                name: {"enabled": cfg.enabled, "hasCredentials": cfg.has_credentials}
                for name, cfg in hosts.items()
            },
            "message": "Video hosting service status",
        }
    )


@router.get("/index-status")
async def index_status(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    return JSONResponse(content=state.index_store.current.stats.to_dict())


@router.get("/lookup")
async def index_lookup(
    request: Request,
    title: str | None = Query(default=None),
    content_type: str | None = Query(default=None, alias="type"),
    year: str | None = Query(default=None),
    season: str | None = Query(default=None),
    episode: str | None = Query(default=None),
) -> JSONResponse:
    """Answer from the pre-built index only; never contacts a host.

    Returns 503 until the first index build has completed.
    """
    state = cast(AppState, request.app.state)
    try:
        video_request = parse_video_request(
            {
                "title": title,
                "type": content_type,
                "year": year,
                "season": season,
                "episode": episode,
            }
        )
    except InvalidVideoRequest as e:
        return _bad_request(e)

    lookup = state.index_lookup_uc
    if not lookup.is_ready:
        return JSONResponse(status_code=503, content={"error": "Index not built yet"})

    entries = lookup.lookup(video_request)
    aggregate = VideoAggregate(
        servers=servers_from_entries(entries),
        request=video_request,
        source="index",
    )
    return JSONResponse(content=aggregate.to_dict())


@router.post("/index/rebuild")
async def rebuild_index(request: Request) -> JSONResponse:
    """Start a background index rebuild (409 if one is already running)."""
    state = cast(AppState, request.app.state)
    if not state.index_scheduler.trigger_in_background():
        return JSONResponse(
            status_code=409,
            content={"status": "already_running"},
        )
    log.info("index_rebuild_requested")
    return JSONResponse(status_code=202, content={"status": "started"})
