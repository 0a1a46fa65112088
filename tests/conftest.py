# =============================================================================
# Test configuration: in-memory database, local fallback dir, fake sheets URL
# =============================================================================

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from tailortrack import models  # noqa: F401  (registers tables)
from tailortrack.deps import Settings, get_session, get_settings, get_gateway, get_fallback
from tailortrack.main import app
from tailortrack.store import Store
from tailortrack.sync import SyncGateway, LocalFallback

from fakes import FakeSheets, SHEETS_URL


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as s:
        yield s


@pytest.fixture
def store(session) -> Store:
    return Store(session)


# =============================================================================
# SYNC FIXTURES
# =============================================================================

@pytest.fixture
def sheets(monkeypatch) -> FakeSheets:
    fake = FakeSheets()
    monkeypatch.setattr("tailortrack.sync.requests.post", fake)
    return fake


@pytest.fixture
def gateway() -> SyncGateway:
    return SyncGateway(SHEETS_URL, timeout=1)


@pytest.fixture
def fallback(tmp_path) -> LocalFallback:
    return LocalFallback(str(tmp_path / "fallback"))


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        SHEETS_URL=SHEETS_URL,
        FALLBACK_DIR=str(tmp_path / "fallback"),
        AUTO_SYNC=False,
    )


# =============================================================================
# CLIENT FIXTURES
# =============================================================================

@pytest.fixture
def client(engine, gateway, fallback, test_settings, sheets) -> Generator[TestClient, None, None]:
    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_fallback] = lambda: fallback
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
