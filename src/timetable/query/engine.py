"""
Query Engine

Compiles QueryCriteria into a predicate tree and an ordering for the catalog
store.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, List, Tuple
from zoneinfo import ZoneInfo

from ..database.models import QueryCriteria
from .predicates import (
    AllOf,
    AnyOf,
    FieldEquals,
    LocalHourEquals,
    Predicate,
    StartsAfter,
    StartsWithin,
)

# Ascending start time, id as the tie-break
DEFAULT_ORDER: Tuple[str, ...] = ("start_at", "id")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CompiledQuery:
    predicate: Predicate
    order_by: Tuple[str, ...] = DEFAULT_ORDER


class QueryEngine:
    """Turns filter criteria into a single composed predicate."""

    def __init__(self, reference_tz: ZoneInfo, clock: Callable[[], datetime] = utc_now):
        """
        Args:
            reference_tz: Timezone that defines calendar days and hours
            clock: Returns the current aware time; used for future-only filtering
        """
        self.reference_tz = reference_tz
        self.clock = clock

    def day_window(self, day: date) -> StartsWithin:
        """Half-open [start of day, start of next day) in the reference timezone."""
        start = datetime.combine(day, time.min, tzinfo=self.reference_tz)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.reference_tz)
        return StartsWithin(start, end)

    def compile(self, criteria: QueryCriteria) -> CompiledQuery:
        groups: List[Predicate] = []

        if criteria.names:
            groups.append(AnyOf(tuple(FieldEquals("code", n) for n in sorted(criteria.names))))

        if criteria.clubs:
            groups.append(AnyOf(tuple(FieldEquals("club", c) for c in sorted(criteria.clubs))))

        if criteria.dates:
            groups.append(AnyOf(tuple(self.day_window(d) for d in sorted(criteria.dates))))
        else:
            # Without explicit dates only upcoming sessions are visible
            groups.append(StartsAfter(self.clock()))

        if criteria.hours:
            groups.append(AnyOf(tuple(
                LocalHourEquals(h, self.reference_tz) for h in sorted(criteria.hours)
            )))

        if not criteria.include_virtual:
            groups.append(FieldEquals("is_virtual", False))

        return CompiledQuery(predicate=AllOf(tuple(groups)))
