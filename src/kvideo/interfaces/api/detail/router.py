from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from kvideo.interfaces.api.errors import error_response
from kvideo.interfaces.api.presenter import present_detail
from kvideo.interfaces.app_state import AppState

router = APIRouter(tags=["detail"])


class DetailRequest(BaseModel):
    id: str | None = None
    source: str | None = None
    custom_api: str | None = Field(default=None, alias="customApi")


async def _run_detail(
    state: AppState,
    video_id: str | None,
    source: str | None,
    custom_api: str | None,
) -> JSONResponse:
    try:
        detail = await state.detail_uc.execute(
            video_id, source_id=source, custom_api=custom_api
        )
    except Exception as e:
        return error_response(
            state, e, event="detail", video_id=video_id, source=source
        )
    return JSONResponse(present_detail(detail))


@router.get("/api/detail")
async def detail_get(
    request: Request,
    id: str | None = Query(None, description="Video id"),
    source: str | None = Query(None, description="Configured source id"),
    custom_api: str | None = Query(
        None, alias="customApi", description="Ad-hoc Apple-CMS API base URL"
    ),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    return await _run_detail(state, id, source, custom_api)


@router.post("/api/detail")
async def detail_post(request: Request, body: DetailRequest) -> JSONResponse:
    state = cast(AppState, request.app.state)
    return await _run_detail(state, body.id, body.source, body.custom_api)
