import pytest

from gymtracker.storage.kv import MemoryKeyValueStore
from gymtracker.store.sessions import SessionStore

from tests._factories import (
    FakeClock,
    LegacySessionFactory,
    SequentialIds,
    SessionFactory,
)


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path, monkeypatch):
    """Keep tests away from the real data directory and any local .env file.

    Anything that resolves the configured data directory ends up under the
    test's tmp_path instead of the user's home.
    """
    monkeypatch.setenv("GYMTRACKER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("GYMTRACKER_ENV_FILE", str(tmp_path / ".env"))
    monkeypatch.delenv("GYMTRACKER_TIMEZONE", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    yield


@pytest.fixture(scope="session")
def session_factory() -> SessionFactory:
    return SessionFactory()


@pytest.fixture(scope="session")
def legacy_session_factory() -> LegacySessionFactory:
    return LegacySessionFactory()


@pytest.fixture
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_generator() -> SequentialIds:
    return SequentialIds("generated")


@pytest.fixture
def store(storage, clock, id_generator) -> SessionStore:
    return SessionStore(
        storage,
        id_generator=id_generator,
        clock=clock,
        user_timezone="America/New_York",
    )
