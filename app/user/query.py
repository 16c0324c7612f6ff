"""User listing queries.

Search and status filters are expressed as small predicate values that are
independent of the store. ``to_clause`` renders them for SQLAlchemy and
``matches`` evaluates them against in-memory records, so the same filter can
back any store without changing the listing contract.
"""

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, and_, func, or_
from sqlmodel import Session, col, select

from app.user.models import User, UserStatus

SEARCH_FIELDS = ("first_name", "last_name", "email", "location")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
MAX_QUERY_INT = 2**31 - 1


@dataclass(frozen=True)
class Contains:
    """Case-insensitive, unanchored substring match on one field."""

    field: str
    text: str


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class AnyOf:
    predicates: tuple["Predicate", ...]


@dataclass(frozen=True)
class AllOf:
    predicates: tuple["Predicate", ...]


type Predicate = Contains | Equals | AnyOf | AllOf


def search_predicate(
    term: str | None, fields: Sequence[str] = SEARCH_FIELDS
) -> Predicate | None:
    """Match records where any of ``fields`` contains ``term``.

    The term is matched as given, whitespace included; an empty term means
    no search.
    """
    term = term or ""
    if not term:
        return None
    return AnyOf(tuple(Contains(field, term) for field in fields))


def user_filter(search: str | None, status: UserStatus | None) -> Predicate | None:
    """Conjoin the optional search disjunction with an optional status match."""
    parts: list[Predicate] = []
    searched = search_predicate(search)
    if searched is not None:
        parts.append(searched)
    if status is not None:
        parts.append(Equals("status", status))
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return AllOf(tuple(parts))


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def to_clause(predicate: Predicate, model: type = User) -> ColumnElement[bool]:
    """Render a predicate as a SQLAlchemy boolean clause."""
    match predicate:
        case Contains(field, text):
            column = col(getattr(model, field))
            return column.ilike(f"%{_escape_like(text)}%", escape="\\")
        case Equals(field, value):
            return col(getattr(model, field)) == value
        case AnyOf(predicates):
            return or_(*(to_clause(p, model) for p in predicates))
        case AllOf(predicates):
            return and_(*(to_clause(p, model) for p in predicates))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def matches(predicate: Predicate | None, record: Any) -> bool:
    """Evaluate a predicate against an in-memory record."""
    match predicate:
        case None:
            return True
        case Contains(field, text):
            value = getattr(record, field, None)
            return value is not None and text.lower() in str(value).lower()
        case Equals(field, value):
            return getattr(record, field, None) == value
        case AnyOf(predicates):
            return any(matches(p, record) for p in predicates)
        case AllOf(predicates):
            return all(matches(p, record) for p in predicates)
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def coerce_positive_int(raw: Any, default: int) -> int:
    """Parse a leading integer the lenient way query strings are read.

    ``"3"`` and ``"3abc"`` give 3; missing, non-numeric, zero, negative and
    out-of-range values give ``default``. The ceiling keeps
    ``(page - 1) * limit`` inside a signed 64-bit SQL integer.
    """
    if isinstance(raw, bool) or raw is None:
        return default
    if isinstance(raw, int):
        value = raw
    else:
        found = _LEADING_INT.match(str(raw))
        # Overlong digit strings are out of range; int() would also refuse them.
        if not found or len(found.group(1).lstrip("+-0")) > len(str(MAX_QUERY_INT)):
            return default
        value = int(found.group(1))
    return value if 0 < value <= MAX_QUERY_INT else default


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    @classmethod
    def from_query(cls, page: Any, limit: Any, default_limit: int = 10) -> "PageRequest":
        return cls(
            page=coerce_positive_int(page, 1),
            limit=coerce_positive_int(limit, default_limit),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page[T]:
    items: list[T]
    total_items: int
    current_page: int
    items_per_page: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.items_per_page)


def _filtered(statement, predicate: Predicate | None):
    if predicate is None:
        return statement
    return statement.where(to_clause(predicate))


def count_users(session: Session, predicate: Predicate | None) -> int:
    statement = _filtered(select(func.count()).select_from(User), predicate)
    return session.exec(statement).one()


def find_users(
    session: Session,
    predicate: Predicate | None,
    *,
    offset: int = 0,
    limit: int | None = None,
) -> list[User]:
    """Matching users, newest first; same-second ties go to the later insert."""
    statement = _filtered(select(User), predicate).order_by(
        col(User.created_at).desc(), col(User.id).desc()
    )
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def paginate_users(
    session: Session, predicate: Predicate | None, page_request: PageRequest
) -> Page[User]:
    # Count and fetch are separate reads; they may disagree under concurrent writes.
    total = count_users(session, predicate)
    items = find_users(
        session, predicate, offset=page_request.offset, limit=page_request.limit
    )
    return Page(
        items=items,
        total_items=total,
        current_page=page_request.page,
        items_per_page=page_request.limit,
    )
