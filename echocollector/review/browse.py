"""
Browse module.

Search, status filter and sort for echo lists.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Type, TypeVar, Union

from echocollector.core.errors import InvalidArgumentError
from echocollector.core.snapshot import EchoSnapshot

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class EchoFilter(str, Enum):
    """Status filter for echo lists."""
    ALL = "all"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    HAS_PARENT = "has-parent"
    NO_PARENT = "no-parent"


class EchoSort(str, Enum):
    """Sort order for echo lists."""
    NEWEST_FIRST = "newest-first"
    OLDEST_FIRST = "oldest-first"
    STRONGEST_FIRST = "strongest-first"
    WEAKEST_FIRST = "weakest-first"
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"


def _coerce(enum_cls: Type[E], value: Union[E, str]) -> E:
    """
    Accept an enum member, its value, or its name.

    Raises:
        InvalidArgumentError: for anything else
    """
    if isinstance(value, enum_cls):
        return value

    if isinstance(value, str):
        normalized = value.strip().lower().replace("_", "-")
        for member in enum_cls:
            if normalized in (member.value, member.name.lower().replace("_", "-")):
                return member

    choices = ", ".join(m.value for m in enum_cls)
    raise InvalidArgumentError(f"Invalid {enum_cls.__name__}: {value!r} (expected one of: {choices})")


def _created_key(echo: EchoSnapshot) -> datetime:
    return echo.created_at or datetime.min


def _title_key(echo: EchoSnapshot) -> str:
    return (echo.title or "").casefold()


def matches_query(echo: EchoSnapshot, query: str) -> bool:
    """Case-insensitive substring match on title, situation, trigger and insight."""
    if not query:
        return True
    return query.casefold() in echo.searchable_text().casefold()


def matches_filter(echo: EchoSnapshot, status: EchoFilter) -> bool:
    if status is EchoFilter.RESOLVED:
        return echo.is_resolved
    if status is EchoFilter.UNRESOLVED:
        return not echo.is_resolved
    if status is EchoFilter.HAS_PARENT:
        return echo.has_parent
    if status is EchoFilter.NO_PARENT:
        return not echo.has_parent
    return True


def sort_echoes(echoes: Iterable[EchoSnapshot], sort: EchoSort) -> List[EchoSnapshot]:
    if sort is EchoSort.NEWEST_FIRST:
        return sorted(echoes, key=_created_key, reverse=True)
    if sort is EchoSort.OLDEST_FIRST:
        return sorted(echoes, key=_created_key)
    if sort is EchoSort.STRONGEST_FIRST:
        return sorted(echoes, key=lambda e: e.connection_strength or 0, reverse=True)
    if sort is EchoSort.WEAKEST_FIRST:
        return sorted(echoes, key=lambda e: e.connection_strength or 0)
    if sort is EchoSort.TITLE_ASC:
        return sorted(echoes, key=_title_key)
    return sorted(echoes, key=_title_key, reverse=True)


def filter_and_sort(
    echoes: Iterable[EchoSnapshot],
    query: str = "",
    status: Union[EchoFilter, str] = EchoFilter.ALL,
    sort: Union[EchoSort, str] = EchoSort.NEWEST_FIRST,
) -> List[EchoSnapshot]:
    """
    Search, then filter, then sort.

    Returns a new list; the input is not modified.

    Raises:
        InvalidArgumentError: if status or sort is not a known option
    """
    status = _coerce(EchoFilter, status)
    sort = _coerce(EchoSort, sort)
    query = query or ""

    result = [
        e for e in echoes
        if matches_query(e, query) and matches_filter(e, status)
    ]

    logger.debug(f"Browse: query={query!r} status={status.value} sort={sort.value} -> {len(result)}")
    return sort_echoes(result, sort)


def resolved_echoes(echoes: Iterable[EchoSnapshot]) -> List[EchoSnapshot]:
    """Resolved echoes, most recently resolved first."""
    return sorted(
        (e for e in echoes if e.is_resolved),
        key=lambda e: e.resolved_date or datetime.min,
        reverse=True,
    )


def recent_echoes(echoes: Iterable[EchoSnapshot], limit: int = 5) -> List[EchoSnapshot]:
    """Newest echoes for the dashboard."""
    return sort_echoes(echoes, EchoSort.NEWEST_FIRST)[:limit]
