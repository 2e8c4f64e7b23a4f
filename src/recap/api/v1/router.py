"""V1 API router -- aggregates all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from src.recap.api.v1 import emails, health, summaries

router = APIRouter()

router.include_router(health.router)
router.include_router(summaries.router)
router.include_router(emails.router)
