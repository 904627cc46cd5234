import pytest
import pytest_asyncio
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spectapps.main import app
from spectapps.models.video import VideoHistory  # noqa: F401
from spectapps.db.session import Base
from spectapps.services.history import HistoryStore, SQLHistoryStore
from spectapps.services.video_generation.base_provider import BaseJobClient, RemoteJobStatus
from spectapps.services.video_generation.orchestrator import (
    GenerationOrchestrator, get_generation_orchestrator
)
from tests.factories import RemoteJobSnapshotFactory

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session_factory():
    """Fresh in-memory schema for each test."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def history_store(db_session_factory):
    return SQLHistoryStore(db_session_factory)


@pytest.fixture
def mock_job_client(mocker):
    """Job client double; by default the job is created and immediately succeeds."""
    client = mocker.Mock(spec=BaseJobClient)
    client.resolve_model = AsyncMock(return_value="version-abc")
    client.create_job = AsyncMock(return_value=RemoteJobSnapshotFactory())
    client.get_status = AsyncMock(
        return_value=RemoteJobSnapshotFactory(
            status=RemoteJobStatus.SUCCEEDED, output=["https://cdn.example.com/video.mp4"]
        )
    )
    return client


@pytest.fixture
def mock_history(mocker):
    return mocker.Mock(spec=HistoryStore)


@pytest_asyncio.fixture
async def orchestrator(mock_job_client, mock_history):
    orchestrator = GenerationOrchestrator(
        client=mock_job_client,
        history=mock_history,
        model_name="acme/video-model",
        aspect_ratio="9:16",
        poll_interval=0
    )
    yield orchestrator
    orchestrator.close()


@pytest_asyncio.fixture
async def api_orchestrator(mock_job_client, history_store):
    """Orchestrator behind the API; polling is slow enough to never tick during a test."""
    orchestrator = GenerationOrchestrator(
        client=mock_job_client,
        history=history_store,
        model_name="acme/video-model",
        poll_interval=60
    )
    app.dependency_overrides[get_generation_orchestrator] = lambda: orchestrator
    yield orchestrator
    orchestrator.close()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(api_orchestrator):
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
