"""Tests for app/user/query.py - Search predicates and pagination."""

from datetime import datetime
from types import SimpleNamespace

import pytest
from hypothesis import given
from hypothesis import settings as hypothesis_settings
from hypothesis import strategies as st
from sqlmodel import Session

from app.user.models import UserStatus
from app.user.query import (
    SEARCH_FIELDS,
    AllOf,
    AnyOf,
    Contains,
    Equals,
    Page,
    PageRequest,
    coerce_positive_int,
    count_users,
    find_users,
    matches,
    paginate_users,
    search_predicate,
    user_filter,
)


def _record(**overrides):
    values = {
        "first_name": "Jane",
        "last_name": "Roe",
        "email": "jane@example.com",
        "location": "Lisbon",
        "mobile": "1234567890",
        "status": UserStatus.active,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestCoercePositiveInt:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 7),
            ("", 7),
            ("abc", 7),
            ("0", 7),
            ("-3", 7),
            ("3", 3),
            (" 4 ", 4),
            ("5abc", 5),
            ("2.9", 2),
            (6, 6),
            (0, 7),
            ("2147483647", 2147483647),
            ("2147483648", 7),
            ("99999999999999999999", 7),
            ("0000000012", 12),
            ("9" * 5000, 7),
            (2**40, 7),
        ],
    )
    def test_values(self, raw, expected):
        assert coerce_positive_int(raw, 7) == expected


class TestPredicates:
    def test_empty_search_has_no_predicate(self):
        assert search_predicate("") is None
        assert search_predicate(None) is None

    def test_search_term_keeps_whitespace(self):
        predicate = search_predicate(" john ")

        assert predicate == AnyOf(
            tuple(Contains(field, " john ") for field in SEARCH_FIELDS)
        )
        assert not matches(predicate, _record(first_name="John"))
        assert matches(predicate, _record(location="Big John Town"))
        assert matches(search_predicate("   "), _record(location="New   York"))

    def test_search_is_disjunction_over_four_fields(self):
        assert search_predicate("john") == AnyOf(
            (
                Contains("first_name", "john"),
                Contains("last_name", "john"),
                Contains("email", "john"),
                Contains("location", "john"),
            )
        )

    def test_filter_combines_search_and_status_with_and(self):
        predicate = user_filter("john", UserStatus.inactive)
        assert isinstance(predicate, AllOf)
        assert predicate.predicates[1] == Equals("status", UserStatus.inactive)

    def test_filter_without_inputs_is_none(self):
        assert user_filter("", None) is None

    def test_location_match(self):
        assert matches(search_predicate("john"), _record(location="Johnstown"))

    def test_case_insensitive(self):
        assert matches(search_predicate("JANE"), _record())
        assert matches(search_predicate("EXAMPLE.COM"), _record())

    def test_no_field_matches(self):
        assert not matches(search_predicate("john"), _record())

    def test_status_must_also_match(self):
        predicate = user_filter("jane", UserStatus.inactive)
        assert not matches(predicate, _record())
        assert matches(predicate, _record(status=UserStatus.inactive))

    def test_none_matches_everything(self):
        assert matches(None, _record())

    @hypothesis_settings(max_examples=100)
    @given(
        term=st.text(alphabet="abcJOHN", min_size=1, max_size=4),
        fields=st.fixed_dictionaries(
            {
                "first_name": st.text(alphabet="abcjohnJOHN", max_size=8),
                "last_name": st.text(alphabet="abcjohnJOHN", max_size=8),
                "email": st.text(alphabet="abcjohnJOHN@.", max_size=8),
                "location": st.text(alphabet="abcjohnJOHN", max_size=8),
            }
        ),
    )
    def test_matches_iff_any_field_contains_term(self, term, fields):
        """Property: a record matches iff one of the four fields contains the term."""
        expected = any(term.lower() in value.lower() for value in fields.values())
        assert matches(search_predicate(term), _record(**fields)) is expected


class TestPageArithmetic:
    def test_offset(self):
        assert PageRequest(page=1, limit=10).offset == 0
        assert PageRequest(page=3, limit=10).offset == 20

    def test_from_query_defaults(self):
        assert PageRequest.from_query(None, "junk", default_limit=25) == PageRequest(
            page=1, limit=25
        )

    def test_total_pages(self):
        page = Page(items=[], total_items=25, current_page=1, items_per_page=10)
        assert page.total_pages == 3

    def test_total_pages_empty(self):
        page = Page(items=[], total_items=0, current_page=1, items_per_page=10)
        assert page.total_pages == 0

    @hypothesis_settings(max_examples=100)
    @given(
        total=st.integers(min_value=0, max_value=500),
        limit=st.integers(min_value=1, max_value=50),
    )
    def test_pages_cover_all_items(self, total, limit):
        """Property: total_pages is the least page count holding every item."""
        pages = Page([], total, 1, limit).total_pages
        assert pages * limit >= total
        assert (pages - 1) * limit < total or total == 0


class TestStoreQueries:
    def test_search_against_database(self, session: Session, make_user):
        make_user(first_name="Johnny", location="Austin")
        make_user(last_name="Littlejohn")
        make_user(email="JOHN.smith@example.com")
        make_user(location="Johnstown")
        make_user(first_name="Mary", last_name="Major", location="Boston")

        predicate = search_predicate("john")

        assert count_users(session, predicate) == 4
        assert {u.first_name for u in find_users(session, predicate)} >= {"Johnny"}
        assert "Mary" not in {u.first_name for u in find_users(session, predicate)}

    def test_like_wildcards_are_literal(self, session: Session, make_user):
        make_user(location="100% Town")
        make_user(location="Under_score")
        make_user(location="Plain")

        assert count_users(session, search_predicate("%")) == 1
        assert count_users(session, search_predicate("_")) == 1

    @pytest.mark.parametrize("term", ["émile", "ÉMILE", "Émile", "MÜLLER", "zoë"])
    def test_search_folds_non_ascii_case(self, session: Session, make_user, term):
        make_user(first_name="Émile", last_name="Zoë", location="Müller Straße")
        make_user(first_name="Emile", last_name="Zoe", location="Muller")

        predicate = search_predicate(term)
        found = find_users(session, predicate)

        assert count_users(session, predicate) == 1
        assert all(matches(predicate, user) for user in found)
        assert found[0].first_name == "Émile"

    def test_status_filter(self, session: Session, make_user):
        make_user(status=UserStatus.active)
        make_user(status=UserStatus.inactive)
        make_user(status=UserStatus.inactive)

        predicate = user_filter("", UserStatus.inactive)
        assert count_users(session, predicate) == 2
        assert all(u.status is UserStatus.inactive for u in find_users(session, predicate))

    def test_newest_first(self, session: Session, make_user):
        older = make_user(created_at=datetime(2026, 1, 1))
        newer = make_user(created_at=datetime(2026, 2, 1))

        assert [u.id for u in find_users(session, None)] == [newer.id, older.id]

    def test_same_second_ties_go_to_later_insert(self, session: Session, make_user):
        moment = datetime(2026, 3, 1, 12, 0, 0)
        first = make_user(created_at=moment)
        second = make_user(created_at=moment)

        assert [u.id for u in find_users(session, None)] == [second.id, first.id]

    def test_pagination(self, session: Session, make_user):
        for _ in range(25):
            make_user()

        page3 = paginate_users(session, None, PageRequest(page=3, limit=10))
        page4 = paginate_users(session, None, PageRequest(page=4, limit=10))

        assert page3.total_items == 25
        assert page3.total_pages == 3
        assert len(page3.items) == 5
        assert page4.items == []
        assert page4.current_page == 4
