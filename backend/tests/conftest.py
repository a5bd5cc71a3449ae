import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.main import app
from tests.helpers import level

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. Use sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models MUST be imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables are rebuilt for every test; ids are not stable across tests
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    # Import all models to ensure they're registered BEFORE create_all
    from app.models.coach import Coach  # noqa: F401
    from app.models.hub import Hub  # noqa: F401
    from app.models.practice_schedule import PracticeSchedule  # noqa: F401
    from app.models.rotation_block import RotationBlock  # noqa: F401
    from app.models.rotation_event import RotationEvent  # noqa: F401
    from app.models.rotation_grid_settings import RotationGridSettings  # noqa: F401

    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the entire
    duration. This ensures the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def abc_levels():
    """A and B share 09:00-10:00, C runs 09:30-10:30."""
    return [level("A", "09:00", "10:00"), level("B", "09:00", "10:00"), level("C", "09:30", "10:30")]


@pytest.fixture
def abc_hub(client: TestClient):
    """Hub with A, B (09:00-10:00) and C (09:30-10:30) practicing on Monday, plus its event palette."""
    hub = client.post("/api/hubs", json={"name": "Rotation Test Hub"}).json()
    for name, start, end in [("A", "09:00:00", "10:00:00"), ("B", "09:00:00", "10:00:00"), ("C", "09:30:00", "10:30:00")]:
        response = client.post(
            f"/api/hubs/{hub['id']}/practice-schedules",
            json={"level": name, "days_of_week": [1], "start_time": start, "end_time": end},
        )
        assert response.status_code == 201
    events = client.get(f"/api/hubs/{hub['id']}/rotation-events").json()
    return {"hub": hub, "events": {e["name"]: e for e in events}}
