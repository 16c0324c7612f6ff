from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.core.cors import add_cors_middleware
from app.core.exception_handlers import register_exception_handlers
from app.core.logging import configure_logging
from app.core.request_logging import add_request_logging_middleware
from app.core.settings import get_settings
from app.db.engine import create_db_and_tables, engine
from app.router import api_router
from app.user.storage import ProfileImageStorage

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    ProfileImageStorage(settings.upload_dir, settings.upload_url_prefix).ensure_dir()
    if settings.db_auto_create:
        create_db_and_tables()
    yield
    engine.dispose()


app = FastAPI(title="User Directory", version="0.1.0", lifespan=lifespan)

app.include_router(api_router)

# Stored profile images; the directory is created by lifespan.
_settings = get_settings()
app.mount(
    _settings.upload_url_prefix,
    StaticFiles(directory=_settings.upload_dir, check_dir=False),
    name="uploads",
)

add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)
