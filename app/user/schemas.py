"""User domain schemas.

Response schemas for user operations. Request payloads are declared in
``app.user.validation``. Field names go over the wire in camelCase.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from app.user.models import Gender, UserStatus


class UserRead(BaseModel):
    """Response schema for a user record."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    first_name: str
    last_name: str
    email: str
    mobile: str
    gender: Gender
    status: UserStatus
    profile: str | None
    location: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Format datetime as ISO 8601 string in UTC.

        Converts datetime to UTC timezone and formats with Z suffix
        (e.g. 2026-01-19T12:34:56Z).
        """
        if value.tzinfo is not None:
            utc_value = value.astimezone(UTC)
        else:
            # Naive datetime (SQLite) - stored as UTC by TimestampMixin
            utc_value = value.replace(tzinfo=UTC)

        return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


class UserStatusUpdate(BaseModel):
    """Body of the status-only update. Checked by the service, not pydantic."""

    status: str | None = None
