"""
Pytest configuration for the alert pipeline tests
"""

import os
import sys

# Settings are read at import time; keep tests offline and deterministic
os.environ.setdefault("SCHEDULER_ENABLED", "False")
os.environ.setdefault("SMS_DRY_RUN", "True")
os.environ.setdefault("ALERT_AQI_THRESHOLD", "88")
os.environ.setdefault("APP_NAME", "BreathSafe")

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import httpx
import pytest

from data.database import Database
from data.fetcher import AirQualityDataFetcher
from fakes import OpenMeteoStub


@pytest.fixture
def open_meteo():
    return OpenMeteoStub()


@pytest.fixture
async def fetcher(open_meteo):
    client = httpx.AsyncClient(transport=httpx.MockTransport(open_meteo.handler))
    fetcher = AirQualityDataFetcher(client=client)
    yield fetcher
    await fetcher.aclose()


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'alerts.db'}")
    await db.initialize()
    yield db
    await db.dispose()
