"""Centralized dependency type aliases for FastAPI routes.

Import all dependencies from this single module:
    from app.core.deps import SessionDep, SettingsDep, ProfileStorageDep, UserServiceDep
"""

from typing import Annotated

from fastapi import BackgroundTasks, Depends
from sqlmodel import Session

from app.core.settings import Settings, get_settings
from app.db.engine import get_session
from app.user.service import UserService
from app.user.storage import ProfileImageStorage

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_profile_storage(settings: SettingsDep) -> ProfileImageStorage:
    return ProfileImageStorage(settings.upload_dir, settings.upload_url_prefix)


# Profile image store rooted at the configured upload directory
ProfileStorageDep = Annotated[ProfileImageStorage, Depends(get_profile_storage)]


def get_user_service(
    session: SessionDep,
    settings: SettingsDep,
    storage: ProfileStorageDep,
    background_tasks: BackgroundTasks,
) -> UserService:
    """Build the user service for one request.

    Image releases are queued as background tasks so they run after the
    response is sent.
    """

    def release(profile: str) -> None:
        background_tasks.add_task(storage.release, profile)

    return UserService(session, storage, settings, release=release)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
