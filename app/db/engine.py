from collections.abc import Generator

from sqlalchemy import Engine, event
from sqlmodel import Session, SQLModel, create_engine

from app.core.settings import get_settings


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, _connection_record) -> None:
    # SQLite's built-in lower() folds ASCII only; ILIKE renders as lower() LIKE lower().
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def register_sqlite_functions(target: Engine) -> None:
    """Install Unicode-aware SQL functions on every new SQLite connection."""
    if target.dialect.name == "sqlite":
        event.listen(target, "connect", _register_sqlite_functions)


_settings = get_settings()

connect_args: dict[str, object] = {}
if _settings.database_url.startswith("sqlite"):
    # Required for SQLite when used with FastAPI across threads.
    connect_args = {"check_same_thread": False}

engine = create_engine(_settings.database_url, echo=False, connect_args=connect_args)
register_sqlite_functions(engine)


def create_db_and_tables() -> None:
    """Create every registered table that does not exist yet."""
    import app.models  # noqa: F401  (registers table models in SQLModel.metadata)

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
