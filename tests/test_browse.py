"""
Unit tests for echo search, filter and sort.
"""

import pytest
import sys
from datetime import date, datetime
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from echocollector.core.errors import InvalidArgumentError
from echocollector.core.snapshot import EchoSnapshot
from echocollector.review.browse import (
    EchoFilter,
    EchoSort,
    filter_and_sort,
    recent_echoes,
    resolved_echoes,
)


def _echo(echo_id, title="Echo", past_situation="", current_trigger="", insight=None,
          strength=5, resolved=False, parent_id=None, created_at=None, resolved_date=None):
    return EchoSnapshot(
        id=echo_id,
        title=title,
        past_date=date(2020, 1, 1),
        past_situation=past_situation,
        current_trigger=current_trigger,
        insight=insight,
        connection_strength=strength,
        is_resolved=resolved,
        resolved_date=resolved_date,
        parent_id=parent_id,
        created_at=created_at,
    )


def _ids(echoes):
    return [e.id for e in echoes]


@pytest.fixture
def journal():
    return [
        _echo(1, title="Car loan", past_situation="Loan payment missed", strength=7,
              created_at=datetime(2024, 1, 10)),
        _echo(2, title="birthday gift", current_trigger="Saw the same watch", strength=3,
              resolved=True, created_at=datetime(2024, 3, 5)),
        _echo(3, title="Amazon splurge", insight="Wait a day before buying", strength=9,
              parent_id=2, created_at=datetime(2023, 12, 1)),
        _echo(4, title="Rent deposit", strength=1, resolved=True, parent_id=1,
              created_at=datetime(2024, 6, 20)),
    ]


class TestSearch:
    """Test case-insensitive search."""

    def test_mixed_case_match(self, journal):
        """'loan' matches 'Loan payment missed'."""
        result = filter_and_sort(journal, "loan")
        assert _ids(result) == [1]

    def test_matches_trigger_and_insight(self, journal):
        assert _ids(filter_and_sort(journal, "WATCH")) == [2]
        assert _ids(filter_and_sort(journal, "a day before")) == [3]

    def test_empty_query_matches_all(self, journal):
        assert len(filter_and_sort(journal, "")) == 4

    def test_no_match(self, journal):
        assert filter_and_sort(journal, "crypto") == []

    def test_missing_fields_are_empty(self):
        echo = EchoSnapshot(id=1, title=None, past_situation=None, current_trigger=None)
        assert filter_and_sort([echo], "") == [echo]
        assert filter_and_sort([echo], "none") == []


class TestStatusFilter:
    """Test status filters."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            (EchoFilter.ALL, {1, 2, 3, 4}),
            (EchoFilter.RESOLVED, {2, 4}),
            (EchoFilter.UNRESOLVED, {1, 3}),
            (EchoFilter.HAS_PARENT, {3, 4}),
            (EchoFilter.NO_PARENT, {1, 2}),
        ],
    )
    def test_filters(self, journal, status, expected):
        assert set(_ids(filter_and_sort(journal, status=status))) == expected

    def test_filter_applies_after_search(self, journal):
        result = filter_and_sort(journal, "r", status=EchoFilter.RESOLVED)
        assert set(_ids(result)) == {2, 4}


class TestSort:
    """Test sort orders."""

    def test_newest_first_is_default(self, journal):
        assert _ids(filter_and_sort(journal)) == [4, 2, 1, 3]

    def test_oldest_first(self, journal):
        assert _ids(filter_and_sort(journal, sort=EchoSort.OLDEST_FIRST)) == [3, 1, 2, 4]

    def test_strength(self, journal):
        assert _ids(filter_and_sort(journal, sort=EchoSort.STRONGEST_FIRST)) == [3, 1, 2, 4]
        assert _ids(filter_and_sort(journal, sort=EchoSort.WEAKEST_FIRST)) == [4, 2, 1, 3]

    def test_title_case_insensitive(self, journal):
        """Lowercase 'birthday' sorts between 'Amazon' and 'Car'."""
        assert _ids(filter_and_sort(journal, sort=EchoSort.TITLE_ASC)) == [3, 2, 1, 4]
        assert _ids(filter_and_sort(journal, sort=EchoSort.TITLE_DESC)) == [4, 1, 2, 3]

    def test_missing_created_at_sorts_earliest(self, journal):
        undated = _echo(5)
        echoes = journal + [undated]

        assert _ids(filter_and_sort(echoes, sort=EchoSort.NEWEST_FIRST))[-1] == 5
        assert _ids(filter_and_sort(echoes, sort=EchoSort.OLDEST_FIRST))[0] == 5


class TestArguments:
    """Test option coercion and rejection."""

    def test_string_options(self, journal):
        result = filter_and_sort(journal, "", "resolved", "oldest-first")
        assert _ids(result) == [2, 4]

    def test_enum_names_accepted(self, journal):
        result = filter_and_sort(journal, "", "HAS_PARENT", "STRONGEST_FIRST")
        assert _ids(result) == [3, 4]

    def test_unknown_sort_rejected(self, journal):
        with pytest.raises(InvalidArgumentError):
            filter_and_sort(journal, sort="loudest-first")

    def test_unknown_filter_rejected(self, journal):
        with pytest.raises(ValueError):
            filter_and_sort(journal, status="archived")

    def test_input_not_modified(self, journal):
        before = list(journal)
        filter_and_sort(journal, "", EchoFilter.RESOLVED, EchoSort.TITLE_DESC)
        assert journal == before


class TestListings:
    """Test dashboard listings."""

    def test_resolved_newest_first(self):
        echoes = [
            _echo(1, resolved=True, resolved_date=datetime(2024, 1, 1)),
            _echo(2),
            _echo(3, resolved=True, resolved_date=datetime(2025, 1, 1)),
        ]
        assert _ids(resolved_echoes(echoes)) == [3, 1]

    def test_recent_limit(self, journal):
        assert _ids(recent_echoes(journal, limit=2)) == [4, 2]
