"""Pytest configuration and shared fixtures for API tests."""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set config before app imports so routes and CORS use it
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("API_PREFIX", "")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:5173")

from app.main import app
from app.schemas.health import BiometricRecord


@pytest_asyncio.fixture
async def client():
    """Yield AsyncClient bound to the ASGI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def sample_payload() -> dict:
    """Request body as the browser client sends it."""
    return {
        "age": 30,
        "height": 175,
        "weight": 70,
        "gender": "male",
        "activityLevel": "moderate",
        "sleepHours": 6,
        "waterIntake": 2,
        "symptoms": "",
    }


@pytest.fixture
def make_record():
    """Build a BiometricRecord with defaults overridden by keyword (field names)."""

    def _make(**overrides) -> BiometricRecord:
        fields = {
            "age": 30,
            "height": 175.0,
            "weight": 70.0,
            "gender": "male",
            "activity_level": "moderate",
            "sleep_hours": 8.0,
            "water_intake": 2.5,
            "symptoms": None,
        }
        fields.update(overrides)
        return BiometricRecord(**fields)

    return _make
