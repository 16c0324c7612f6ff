import inspect
from datetime import datetime, timedelta
from itertools import count

import anyio
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.settings import Settings, get_settings
from app.db.engine import get_session, register_sqlite_functions
from app.main import app
from app.user.models import Gender, User, UserStatus
from app.user.service import UserService
from app.user.storage import ProfileImageStorage


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create an in-memory SQLite database for testing."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="mock_settings")
def mock_settings_fixture(tmp_path):
    """Settings pointing uploads at a temporary directory."""
    return Settings(
        env_name="test",
        database_url="sqlite://",
        upload_dir=tmp_path / "uploads",
        upload_url_prefix="/uploads",
    )


@pytest.fixture(name="storage")
def storage_fixture(mock_settings: Settings):
    storage = ProfileImageStorage(
        mock_settings.upload_dir, mock_settings.upload_url_prefix
    )
    storage.ensure_dir()
    return storage


@pytest.fixture(name="released")
def released_fixture():
    """Profile paths handed to the service's release callback."""
    return []


@pytest.fixture(name="service")
def service_fixture(
    session: Session,
    storage: ProfileImageStorage,
    mock_settings: Settings,
    released: list[str],
):
    return UserService(session, storage, mock_settings, release=released.append)


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    """Factory inserting users with distinct emails and increasing created_at."""
    seq = count(1)
    base = datetime(2026, 1, 1, 9, 0, 0)

    def _make_user(**overrides) -> User:
        n = next(seq)
        values = {
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "email": f"user{n}@example.com",
            "mobile": f"{9000000000 + n}",
            "gender": Gender.male,
            "status": UserStatus.active,
            "location": "Springfield",
            "created_at": base + timedelta(minutes=n),
            "updated_at": base + timedelta(minutes=n),
        }
        values.update(overrides)
        user = User(**values)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture(name="client")
def client_fixture(session: Session, mock_settings: Settings):
    """Create a test client with overridden dependencies."""

    def get_session_override():
        return session

    def get_settings_override():
        return mock_settings

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_settings] = get_settings_override

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="valid_payload")
def valid_payload_fixture():
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "John.Doe@Example.com",
        "mobile": "9876543210",
        "gender": "Male",
        "location": "Johnstown",
    }
