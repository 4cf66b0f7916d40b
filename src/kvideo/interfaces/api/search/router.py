from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from kvideo.domain.entities.catalog import SourceConfig
from kvideo.domain.entities.errors import ClientInputError
from kvideo.interfaces.api.errors import error_response
from kvideo.interfaces.api.presenter import present_search
from kvideo.interfaces.app_state import AppState

router = APIRouter(tags=["search"])


class SearchRequest(BaseModel):
    query: str | None = None
    sources: list[str] | None = None
    page: int = 1


def _resolve_sources(state: AppState, source_ids: list[str]) -> list[SourceConfig]:
    sources = state.sources.resolve(source_ids)
    if not sources:
        raise ClientInputError("No valid sources found")
    return sources


async def _run_search(
    state: AppState, query: str, sources: list[SourceConfig], page: int
) -> JSONResponse:
    response = await state.search_uc.execute(query, sources, page)
    return JSONResponse(present_search(response))


@router.post("/api/search")
async def search_post(request: Request, body: SearchRequest) -> JSONResponse:
    """Structured search: ``{query, sources, page}``."""
    state = cast(AppState, request.app.state)

    try:
        if not body.query or not body.query.strip():
            raise ClientInputError("Invalid or missing query parameter")
        if not body.sources:
            raise ClientInputError("At least one source must be specified")
        sources = _resolve_sources(state, body.sources)
        return await _run_search(state, body.query, sources, body.page)
    except Exception as e:
        return error_response(state, e, event="search", query=body.query)


@router.get("/api/search")
async def search_get(
    request: Request,
    q: str | None = Query(None, description="Search query"),
    query: str | None = Query(None, description="Alias of q"),
    sources: str | None = Query(
        None, description="Comma-separated source ids (default: all enabled)"
    ),
    page: int = Query(1, description="Result page"),
) -> JSONResponse:
    """Simple search: ``?q=...&sources=a,b&page=1``."""
    state = cast(AppState, request.app.state)
    text = q or query

    try:
        if not text or not text.strip():
            raise ClientInputError("Missing query parameter")
        if sources:
            source_ids = [s.strip() for s in sources.split(",") if s.strip()]
        else:
            source_ids = [s.id for s in state.sources.enabled()]
        resolved = _resolve_sources(state, source_ids)
        return await _run_search(state, text, resolved, page)
    except Exception as e:
        return error_response(state, e, event="search", query=text)
