"""CSV export of user records."""

import csv
import io
from collections.abc import Iterable, Iterator

from app.user.models import User

CSV_COLUMNS = (
    "ID",
    "Full Name",
    "Email",
    "Mobile",
    "Gender",
    "Status",
    "Location",
    "Created At",
)


def user_rows(users: Iterable[User], date_format: str) -> Iterator[list[str]]:
    """Flatten users into CSV rows.

    ``ID`` is the 1-based row number, not the record id.
    """
    for number, user in enumerate(users, start=1):
        yield [
            str(number),
            user.full_name,
            user.email,
            user.mobile,
            user.gender.value,
            user.status.value,
            user.location,
            user.created_at.strftime(date_format),
        ]


def users_to_csv(users: Iterable[User], date_format: str = "%m/%d/%Y") -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    writer.writerows(user_rows(users, date_format))
    return buffer.getvalue()
