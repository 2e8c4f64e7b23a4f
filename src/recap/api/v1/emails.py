"""Summary email endpoint.

POST /api/send-email takes ``{to, subject?, body}`` where ``to`` is a list
of addresses or one comma-separated string. Responds ``{message, ok: true}``
when the send went out (possibly with some recipients failing) and
``{error, ok: false}`` otherwise.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from src.recap.api.deps import preflight_response, read_json_payload
from src.recap.pipeline.runner import run_send_email

router = APIRouter(prefix="/api", tags=["emails"])


def _get_email_dispatcher(request: Request) -> Any:
    """Retrieve EmailDispatcher from app.state, 503 if not available."""
    dispatcher = getattr(request.app.state, "email_dispatcher", None)
    if dispatcher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Email dispatcher not initialized",
        )
    return dispatcher


@router.post("/send-email")
async def send_email(request: Request) -> JSONResponse:
    """Send a summary email to every listed recipient."""
    dispatcher = _get_email_dispatcher(request)
    payload = await read_json_payload(request)
    result = await run_send_email(payload, dispatcher)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.options("/send-email")
async def send_email_preflight(request: Request) -> Response:
    return preflight_response(request)
