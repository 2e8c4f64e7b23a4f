"""Transcript summarization endpoint.

POST /api/summarize takes ``{transcriptText, customPrompt}`` and returns
``{summary}`` on success or ``{error, details?}`` on failure. OPTIONS
answers preflight requests with the allowed origin, methods and headers.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from src.recap.api.deps import preflight_response, read_json_payload
from src.recap.pipeline.runner import run_summarize

router = APIRouter(prefix="/api", tags=["summaries"])


def _get_summary_generator(request: Request) -> Any:
    """Retrieve SummaryGenerator from app.state, 503 if not available."""
    gen = getattr(request.app.state, "summary_generator", None)
    if gen is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Summary generator not initialized",
        )
    return gen


@router.post("/summarize")
async def summarize(request: Request) -> JSONResponse:
    """Generate a structured summary of a meeting transcript."""
    generator = _get_summary_generator(request)
    payload = await read_json_payload(request)
    result = await run_summarize(payload, generator)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.options("/summarize")
async def summarize_preflight(request: Request) -> Response:
    return preflight_response(request)
