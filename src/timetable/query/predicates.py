"""
Predicate Tree

Small expression tree describing which sessions a query selects. Leaves test
one dimension of a session; AllOf / AnyOf combine them. Every node can be
evaluated against a ClassSession in memory or rendered as a parameterized SQL
condition over the classes table.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Tuple
from zoneinfo import ZoneInfo

from ..database.models import ClassSession

SqlFragment = Tuple[str, List[Any]]

# Session attribute -> classes table column
COLUMNS = {
    "id": "id",
    "code": "code",
    "club": "club_code",
    "is_virtual": "is_virtual",
    "start_at": "start_at",
}


class Predicate:
    """Base class for predicate nodes."""

    def matches(self, session: ClassSession) -> bool:
        raise NotImplementedError

    def to_sql(self) -> SqlFragment:
        raise NotImplementedError


@dataclass(frozen=True)
class FieldEquals(Predicate):
    """Session attribute equals a value."""
    field: str
    value: Any

    def matches(self, session: ClassSession) -> bool:
        return getattr(session, self.field) == self.value

    def to_sql(self) -> SqlFragment:
        return f"{COLUMNS[self.field]} = %s", [self.value]


@dataclass(frozen=True)
class StartsWithin(Predicate):
    """Start time falls in the half-open interval [start, end)."""
    start: datetime
    end: datetime

    def matches(self, session: ClassSession) -> bool:
        return self.start <= session.start_at < self.end

    def to_sql(self) -> SqlFragment:
        return "(start_at >= %s AND start_at < %s)", [self.start, self.end]


@dataclass(frozen=True)
class StartsAfter(Predicate):
    """Start time is strictly later than a moment."""
    moment: datetime

    def matches(self, session: ClassSession) -> bool:
        return session.start_at > self.moment

    def to_sql(self) -> SqlFragment:
        return "start_at > %s", [self.moment]


@dataclass(frozen=True)
class LocalHourEquals(Predicate):
    """Start time, seen in a timezone, falls in the given hour of day."""
    hour: int
    tz: ZoneInfo

    def matches(self, session: ClassSession) -> bool:
        return session.local_hour(self.tz) == self.hour

    def to_sql(self) -> SqlFragment:
        return "EXTRACT(HOUR FROM start_at AT TIME ZONE %s) = %s", [self.tz.key, self.hour]


@dataclass(frozen=True)
class AllOf(Predicate):
    """Logical AND. With no parts it matches everything."""
    parts: Tuple[Predicate, ...] = ()

    def matches(self, session: ClassSession) -> bool:
        return all(part.matches(session) for part in self.parts)

    def to_sql(self) -> SqlFragment:
        return _join(self.parts, " AND ", "TRUE")


@dataclass(frozen=True)
class AnyOf(Predicate):
    """Logical OR. With no parts it matches nothing."""
    parts: Tuple[Predicate, ...] = ()

    def matches(self, session: ClassSession) -> bool:
        return any(part.matches(session) for part in self.parts)

    def to_sql(self) -> SqlFragment:
        return _join(self.parts, " OR ", "FALSE")


MATCH_ALL = AllOf()


def _join(parts: Tuple[Predicate, ...], operator: str, empty: str) -> SqlFragment:
    if not parts:
        return empty, []
    if len(parts) == 1:
        return parts[0].to_sql()
    clauses = []
    params: List[Any] = []
    for part in parts:
        clause, part_params = part.to_sql()
        clauses.append(clause)
        params.extend(part_params)
    return "(" + operator.join(clauses) + ")", params
