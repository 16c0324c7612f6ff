"""User domain router.

User management routes for CRUD, listing, status changes and CSV export.
Create and update accept multipart forms (with an optional ``profile`` image)
or JSON bodies.
"""

from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from starlette.datastructures import UploadFile

from app.core.constants import CommonResponses, Routes
from app.core.deps import SettingsDep, UserServiceDep
from app.core.exceptions import BadRequestError
from app.models.response import ApiResponse, Pagination
from app.user.schemas import UserRead, UserStatusUpdate
from app.user.storage import ProfileImage
from app.user.validation import validate_create, validate_update

router = APIRouter(
    prefix=Routes.USER.prefix,
    tags=[Routes.USER.tag],
    responses={**CommonResponses.BAD_REQUEST},
)

PROFILE_FIELD = "profile"


@dataclass
class UserForm:
    """Submitted user fields plus an optional uploaded profile image."""

    fields: dict[str, Any] = field(default_factory=dict)
    image: ProfileImage | None = None


async def read_user_form(request: Request, settings: SettingsDep) -> UserForm:
    """Read a create/update submission from multipart, urlencoded or JSON.

    At most one byte past ``profile_max_bytes`` of an upload is read, enough
    for the size check to reject it.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise BadRequestError("Malformed JSON body") from None
        if not isinstance(body, dict):
            raise BadRequestError("Request body must be a JSON object")
        body.pop(PROFILE_FIELD, None)
        return UserForm(fields=body)

    form = await request.form()
    user_form = UserForm()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == PROFILE_FIELD and value.filename:
                user_form.image = ProfileImage(
                    filename=value.filename,
                    content_type=value.content_type or "",
                    content=await value.read(settings.profile_max_bytes + 1),
                )
            continue
        # A text profile value is the client echoing the current path.
        if key != PROFILE_FIELD:
            user_form.fields[key] = value
    return user_form


UserFormDep = Annotated[UserForm, Depends(read_user_form)]


def _read(user) -> UserRead:
    return UserRead.model_validate(user)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserRead],
    responses={**CommonResponses.CONFLICT},
)
async def create_user(form: UserFormDep, service: UserServiceDep, settings: SettingsDep):
    """Create a user. Status defaults to Active."""
    payload = validate_create(form.fields, form.image, settings)
    user = service.create(payload, form.image)
    return ApiResponse(message="User created successfully", data=_read(user))


@router.get("", response_model=ApiResponse[list[UserRead]])
async def list_users(
    service: UserServiceDep,
    page: str | None = None,
    limit: str | None = None,
    search: str = "",
    status: str = "",
):
    """List users newest first, filtered by search text and status."""
    result = service.paginate(page=page, limit=limit, search=search, status=status)
    return ApiResponse(
        data=[_read(user) for user in result.items],
        pagination=Pagination(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_items=result.total_items,
            items_per_page=result.items_per_page,
        ),
    )


@router.get(
    "/export/csv",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_users_csv(
    service: UserServiceDep,
    settings: SettingsDep,
    search: str = "",
    status: str = "",
):
    """Download every matching user as CSV."""
    content = service.export_csv(search=search, status=status)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={settings.csv_filename}"
        },
    )


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user(user_id: str, service: UserServiceDep):
    """Get a user by ID."""
    return ApiResponse(data=_read(service.get(user_id)))


@router.put(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.CONFLICT},
)
async def update_user(
    user_id: str, form: UserFormDep, service: UserServiceDep, settings: SettingsDep
):
    """Update the supplied fields of a user; at least one is required."""
    payload = validate_update(form.fields, form.image, settings)
    user = service.update(user_id, payload, form.image)
    return ApiResponse(message="User updated successfully", data=_read(user))


@router.patch(
    "/{user_id}/status",
    response_model=ApiResponse[UserRead],
    responses={**CommonResponses.NOT_FOUND},
)
async def update_user_status(
    user_id: str,
    service: UserServiceDep,
    body: Annotated[UserStatusUpdate | None, Body()] = None,
):
    """Set a user's status to Active or InActive."""
    user = service.update_status(user_id, body.status if body else None)
    return ApiResponse(message="User status updated successfully", data=_read(user))


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[None],
    responses={**CommonResponses.NOT_FOUND},
)
async def delete_user(user_id: str, service: UserServiceDep):
    """Delete a user. Its profile image is released after the response."""
    service.delete(user_id)
    return ApiResponse(message="User deleted successfully")
