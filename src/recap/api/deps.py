"""Shared helpers for API endpoints."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request
from fastapi.responses import Response

from src.recap.config import get_settings

PREFLIGHT_METHODS = "POST, OPTIONS"
PREFLIGHT_HEADERS = "Content-Type"


async def read_json_payload(request: Request) -> Any:
    """Parse the request body as JSON.

    Returns None for an empty or malformed body so validation reports it
    as a normal input error.
    """
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def preflight_response(request: Request) -> Response:
    """Empty 200 response carrying the CORS allow-list.

    With a wildcard configuration the origin is ``*``; otherwise the
    request's Origin is echoed back when it is allowed.
    """
    origins = get_settings().cors_origins
    if "*" in origins:
        allow_origin = "*"
    else:
        requested = request.headers.get("origin", "")
        allow_origin = requested if requested in origins else origins[0] if origins else ""

    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": PREFLIGHT_METHODS,
            "Access-Control-Allow-Headers": PREFLIGHT_HEADERS,
        },
    )
