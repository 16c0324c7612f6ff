"""Response envelope shared by every JSON endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope.

    Errors use the same shape with ``success`` false; see
    ``app.core.exception_handlers``.
    """

    success: bool = True
    message: str | None = None
    data: T | None = None
    pagination: Pagination | None = None
