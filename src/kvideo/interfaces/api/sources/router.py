from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Request

from kvideo.interfaces.api.presenter import present_sources
from kvideo.interfaces.app_state import AppState

router = APIRouter(tags=["sources"])


@router.get("/api/sources")
async def list_sources(request: Request) -> dict:
    """Enabled sources in configuration order."""
    state = cast(AppState, request.app.state)
    return present_sources(state.sources.enabled())
