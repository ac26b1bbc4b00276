from __future__ import annotations

import redis
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from uistate import packing
from uistate.api.deps import get_event_handler, get_redis, get_registry
from uistate.api.models import (
    DecodeCustomIdRequest,
    DecodeCustomIdResponse,
    Interaction,
    InteractionAccepted,
    InteractionType,
)
from uistate.buttons.dispatch import EventHandler
from uistate.buttons.registry import Registry
from uistate.config import settings_from_env
from uistate.streams import recent_error_reports

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/interactions", status_code=status.HTTP_202_ACCEPTED, response_model=None)
async def receive_interaction(
    payload: Interaction,
    background: BackgroundTasks,
    handler: EventHandler = Depends(get_event_handler),
) -> JSONResponse | InteractionAccepted:
    if payload.type == InteractionType.ping:
        return JSONResponse({"type": 1}, status_code=status.HTTP_200_OK)

    origin = payload.origin
    if origin is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"unsupported interaction type: {payload.type.name}",
        )

    # The HTTP reply only acknowledges receipt; handlers answer through the callback endpoint.
    background.add_task(handler.handle, payload, origin)
    return InteractionAccepted(origin=origin)


@router.post("/custom-ids/decode", response_model=DecodeCustomIdResponse)
async def decode_custom_id_route(
    payload: DecodeCustomIdRequest,
    registry: Registry = Depends(get_registry),
) -> DecodeCustomIdResponse:
    from uistate.codec import Reader

    try:
        scheme = packing.scheme_of(payload.custom_id)
        reader = Reader(packing.decode(payload.custom_id))
        key = reader.read_unsigned(bits=64)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    action = registry.actions.get(key)
    return DecodeCustomIdResponse(
        scheme=scheme.value,
        key=key,
        payload_hex=reader.read_rest().hex(),
        registered=action is not None,
        action=action.name if action is not None else None,
        length=len(payload.custom_id),
        within_limit=len(payload.custom_id) <= settings_from_env().max_custom_id_len,
    )


@router.get("/errors")
async def recent_errors(
    count: int = Query(50, ge=1, le=500),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, list[dict[str, str]]]:
    stream = settings_from_env().error_stream
    reports = recent_error_reports(r=r, stream=stream, count=count)
    return {"errors": [{"id": stream_id, **report.to_fields()} for stream_id, report in reports]}
