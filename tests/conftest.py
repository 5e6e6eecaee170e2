"""Pytest configuration and shared fixtures for Bankr tests."""

import copy
import json
import os
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set environment variables before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["STATIC_DIR"] = str(Path(__file__).parent / "no-frontend")
os.environ["ELASTICSEARCH_URL"] = "http://localhost:9200"
os.environ.pop("GEOCODE_API_KEY", None)

from bankr.config import Settings  # noqa: E402
from bankr.search.registry import RegistrySnapshot, load_curated  # noqa: E402
from bankr.services.context import SearchContext  # noqa: E402

# Path to fixture data
FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Fixture data loaders
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def search_response_data() -> dict:
    """Canned engine response: two hits out of 25."""
    with open(FIXTURES_DIR / "search_response.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Settings and registry
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at the fixture files, isolated from any .env file."""
    return Settings(
        _env_file=None,
        data_path=FIXTURES_DIR / "banks.csv",
        banks_list_path=FIXTURES_DIR / "banks.json",
        static_dir=tmp_path / "no-frontend",
        geocode_api_key="test-geocode-key",
    )


@pytest.fixture(scope="session")
def registry() -> RegistrySnapshot:
    """Registry loaded from the curated fixture list."""
    return load_curated(FIXTURES_DIR / "banks.json")


# ---------------------------------------------------------------------------
# Engine client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_es_client(search_response_data: dict) -> MagicMock:
    """Engine client returning canned responses."""
    client = MagicMock()
    client.search.return_value = copy.deepcopy(search_response_data)
    client.ping.return_value = True
    client.indices.exists.return_value = True
    return client


@pytest.fixture
def search_context(
    settings: Settings, mock_es_client: MagicMock, registry: RegistrySnapshot
) -> SearchContext:
    return SearchContext.create(settings, mock_es_client, registry)


# ---------------------------------------------------------------------------
# HTTP test client using httpx.AsyncClient + ASGITransport
# ---------------------------------------------------------------------------

@pytest.fixture
def app(settings: Settings, search_context: SearchContext):
    """Application with a prebuilt search context (lifespan does not run)."""
    from bankr.main import create_app

    application = create_app(settings, context_factory=lambda _: search_context)
    application.state.context = search_context
    return application


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with ASGITransport (no network I/O)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
