"""CORS middleware that leaves preflight requests to the endpoints.

Starlette's CORSMiddleware answers every preflight itself with an ``OK``
body and its own header list. The summarize and send-email routes define
their own OPTIONS handlers (empty body, fixed allow-list), so OPTIONS
requests are passed straight through to the router. All other requests
get the usual CORS response headers.
"""

from __future__ import annotations

from starlette.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send


class RoutePreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight handling is delegated to the routes."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
