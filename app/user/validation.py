"""User validation schema.

Declares the field constraints for creating and updating users and turns
pydantic errors into the human-readable messages clients display. Validation
is exhaustive: every violated constraint is reported, in field declaration
order, followed by any profile image problems.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import ErrorDetails, PydanticCustomError

from app.core.exceptions import ValidationError
from app.core.settings import Settings
from app.user.models import Gender, UserStatus
from app.user.storage import ProfileImage

MOBILE_PATTERN = r"^[0-9]{10}$"
EMPTY_UPDATE_MESSAGE = "At least one field must be provided for update"

FIELD_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "mobile": "Mobile number",
    "gender": "Gender",
    "status": "Status",
    "location": "Location",
}

# Messages for values that are present but malformed.
FORMAT_MESSAGES = {
    "email": "Please enter a valid email address",
    "mobile": "Please enter a valid 10-digit mobile number",
    "gender": "Gender must be either Male or Female",
    "status": "Status must be either Active or InActive",
}

_FIELD_BY_ALIAS = {to_camel(name): name for name in FIELD_LABELS}


class _UserPayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def strip_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", check_fields=False)
    @classmethod
    def lowercase_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None


class UserCreate(_UserPayload):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    mobile: str = Field(pattern=MOBILE_PATTERN)
    gender: Gender
    status: UserStatus = UserStatus.active
    location: str = Field(min_length=2, max_length=100)


class UserUpdate(_UserPayload):
    """Partial update. Only fields present in ``model_fields_set`` are applied."""

    first_name: str | None = Field(default=None, min_length=2, max_length=50)
    last_name: str | None = Field(default=None, min_length=2, max_length=50)
    email: EmailStr | None = None
    mobile: str | None = Field(default=None, pattern=MOBILE_PATTERN)
    gender: Gender | None = None
    status: UserStatus | None = None
    location: str | None = Field(default=None, min_length=2, max_length=100)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("null_value", "value cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Supplied fields only, keyed by column name."""
        return self.model_dump(exclude_unset=True)


def error_message(error: ErrorDetails) -> str:
    """Translate one pydantic error into a user-facing message."""
    loc = error["loc"][0] if error["loc"] else ""
    field = _FIELD_BY_ALIAS.get(str(loc), str(loc))
    label = FIELD_LABELS.get(field, field)
    kind = error["type"]
    value = error.get("input")
    ctx = error.get("ctx") or {}

    if kind == "missing" or (isinstance(value, str) and not value.strip()):
        return f"{label} is required"
    if kind == "null_value":
        return f"{label} cannot be null"
    if kind == "string_too_short":
        return f"{label} must be at least {ctx['min_length']} characters"
    if kind == "string_too_long":
        return f"{label} cannot exceed {ctx['max_length']} characters"
    if field in FORMAT_MESSAGES:
        return FORMAT_MESSAGES[field]
    return f"{label}: {error['msg']}"


def image_errors(image: ProfileImage | None, settings: Settings) -> list[str]:
    """Check an uploaded profile image against the configured type and size."""
    if image is None:
        return []
    errors = []
    if image.content_type.lower() not in settings.profile_image_types_list:
        errors.append("Only image files are allowed")
    if image.size > settings.profile_max_bytes:
        limit_mb = settings.profile_max_bytes / (1024 * 1024)
        errors.append(f"File size must be less than {limit_mb:g}MB")
    return errors


def _validate[M: BaseModel](
    model: type[M], data: Mapping[str, Any]
) -> tuple[M | None, list[str]]:
    try:
        return model.model_validate(dict(data)), []
    except PydanticValidationError as exc:
        return None, [error_message(error) for error in exc.errors()]


def validate_create(
    data: Mapping[str, Any], image: ProfileImage | None, settings: Settings
) -> UserCreate:
    """Validate a create payload, raising ValidationError with every problem."""
    payload, errors = _validate(UserCreate, data)
    errors += image_errors(image, settings)
    if errors or payload is None:
        raise ValidationError(errors)
    return payload


def validate_update(
    data: Mapping[str, Any], image: ProfileImage | None, settings: Settings
) -> UserUpdate:
    """Validate a partial update.

    A new profile image counts as a supplied field, so an image-only update
    is accepted.
    """
    payload, errors = _validate(UserUpdate, data)
    errors += image_errors(image, settings)
    if errors or payload is None:
        raise ValidationError(errors)
    if not payload.model_fields_set and image is None:
        raise ValidationError([EMPTY_UPDATE_MESSAGE])
    return payload
