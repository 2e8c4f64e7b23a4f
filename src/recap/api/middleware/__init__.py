"""API middleware package."""

from src.recap.api.middleware.cors import RoutePreflightCORSMiddleware
from src.recap.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "RoutePreflightCORSMiddleware"]
