"""User service.

Holds the user operations behind the router: create, read, list, update,
status update, delete and CSV export. Routes stay focused on HTTP concerns;
configuration and the image store are passed in at construction.
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.core.exceptions import ValidationError
from app.core.settings import Settings
from app.user.exceptions import (
    EmailExistsError,
    InvalidStatusError,
    UserNotFoundError,
)
from app.user.export import users_to_csv
from app.user.models import User, UserStatus
from app.user.query import Page, PageRequest, find_users, paginate_users, user_filter
from app.user.storage import ProfileImage, ProfileImageStorage
from app.user.validation import FORMAT_MESSAGES, UserCreate, UserUpdate

logger = logging.getLogger("app.user")

ReleaseFn = Callable[[str], None]


def parse_user_id(raw: Any) -> int | None:
    """Identifiers are opaque to clients; anything non-numeric resolves to nothing."""
    text = str(raw).strip()
    if not text.isdigit():
        return None
    return int(text)


def parse_status_filter(raw: str | None) -> UserStatus | None:
    """Read the optional status filter of list and export queries."""
    if raw is None or not raw.strip():
        return None
    try:
        return UserStatus(raw.strip())
    except ValueError:
        raise ValidationError([FORMAT_MESSAGES["status"]]) from None


class UserService:
    def __init__(
        self,
        session: Session,
        storage: ProfileImageStorage,
        settings: Settings,
        release: ReleaseFn | None = None,
    ) -> None:
        self.session = session
        self.storage = storage
        self.settings = settings
        # Image release is deferred by the caller (a background task in routes).
        self._release = release or storage.release

    # --- Reads ---

    def get(self, user_id: Any) -> User:
        parsed = parse_user_id(user_id)
        user = self.session.get(User, parsed) if parsed is not None else None
        if not user:
            raise UserNotFoundError()
        return user

    def paginate(
        self,
        page: Any = None,
        limit: Any = None,
        search: str | None = None,
        status: str | None = None,
    ) -> Page[User]:
        page_request = PageRequest.from_query(
            page, limit, default_limit=self.settings.default_page_size
        )
        predicate = user_filter(search, parse_status_filter(status))
        return paginate_users(self.session, predicate, page_request)

    def export_csv(self, search: str | None = None, status: str | None = None) -> str:
        """Render every matching user, unpaginated, as CSV text."""
        predicate = user_filter(search, parse_status_filter(status))
        users = find_users(self.session, predicate)
        logger.info("Exporting %d users to CSV", len(users))
        return users_to_csv(users, self.settings.csv_date_format)

    # --- Writes ---

    def create(self, payload: UserCreate, image: ProfileImage | None = None) -> User:
        self._ensure_email_free(payload.email)

        user = User(**payload.model_dump())
        stored = self.storage.save(image) if image is not None else None
        user.profile = stored

        try:
            self._commit(user)
        except Exception:
            self._release_quietly(stored)
            raise

        logger.info("User created", extra={"user_id": user.id})
        return user

    def update(
        self, user_id: Any, payload: UserUpdate, image: ProfileImage | None = None
    ) -> User:
        user = self.get(user_id)
        changes = payload.changes()

        if "email" in changes and changes["email"] != user.email:
            self._ensure_email_free(changes["email"], exclude_id=user.id)

        for key, value in changes.items():
            setattr(user, key, value)

        replaced = stored = None
        if image is not None:
            replaced = user.profile
            stored = user.profile = self.storage.save(image)

        user.touch()
        try:
            self._commit(user)
        except Exception:
            self._release_quietly(stored)
            raise

        if replaced:
            self._release(replaced)
        logger.info(
            "User updated (%s)", ", ".join(sorted(changes)) or "profile",
            extra={"user_id": user.id},
        )
        return user

    def update_status(self, user_id: Any, status: Any) -> User:
        """Set only the status. Repeating the same status is not an error."""
        if not isinstance(status, str) or status not in {s.value for s in UserStatus}:
            raise InvalidStatusError()

        user = self.get(user_id)
        user.status = UserStatus(status)
        user.touch()
        self._commit(user)
        logger.info("User status set to %s", status, extra={"user_id": user.id})
        return user

    def delete(self, user_id: Any) -> None:
        user = self.get(user_id)
        deleted_id, profile = user.id, user.profile
        self.session.delete(user)
        self.session.commit()
        logger.info("User deleted", extra={"user_id": deleted_id})

        # The record is gone; the image file goes after the response.
        if profile:
            self._release(profile)

    # --- Helpers ---

    def _ensure_email_free(self, email: str, exclude_id: int | None = None) -> None:
        statement = select(User).where(User.email == email)
        if exclude_id is not None:
            statement = statement.where(col(User.id) != exclude_id)
        if self.session.exec(statement).first():
            raise EmailExistsError()

    def _commit(self, user: User) -> None:
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            # Unique index on email caught a concurrent duplicate.
            self.session.rollback()
            if "email" in str(e.orig).lower():
                raise EmailExistsError() from e
            raise
        self.session.refresh(user)

    def _release_quietly(self, profile: str | None) -> None:
        if profile:
            self.storage.release(profile)
