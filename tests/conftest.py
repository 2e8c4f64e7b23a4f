"""Test fixtures for pipeline, dispatcher and API tests."""

from __future__ import annotations

import pytest

from src.recap.config import get_settings
from tests.fakes import FakeTransport


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Drop cached settings so env overrides in one test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
