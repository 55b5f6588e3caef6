"""
Database Models

Dataclasses representing catalog entities.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Dict, FrozenSet


@dataclass(frozen=True)
class Club:
    """A club from the static registry."""
    code: str
    name: str


@dataclass(frozen=True)
class ClassSession:
    """One scheduled occurrence of a class."""
    id: str
    name: str
    code: str
    club: str
    description: str
    duration_minutes: int
    start_at: datetime
    end_at: datetime
    is_virtual: bool

    def local_day(self, tz: tzinfo) -> date:
        """Calendar day of the start time in the given timezone."""
        return self.start_at.astimezone(tz).date()

    def local_hour(self, tz: tzinfo) -> int:
        """Hour of day of the start time in the given timezone."""
        return self.start_at.astimezone(tz).hour

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ID": self.id,
            "Code": self.code,
            "Description": self.description,
            "Name": self.name,
            "Club": self.club,
            "Duration": self.duration_minutes,
            "StartDatetime": self.start_at.isoformat(),
            "EndDatetime": self.end_at.isoformat(),
            "IsVirtualClass": self.is_virtual,
        }


@dataclass(frozen=True)
class ClassType:
    """Human label for a class code."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"Key": self.id, "Value": self.name}


@dataclass(frozen=True)
class QueryCriteria:
    """
    Filter criteria for a class listing.

    Every set is OR-ed within itself and AND-ed with the others. An empty set
    leaves that dimension unconstrained.
    """
    names: FrozenSet[str] = field(default_factory=frozenset)
    clubs: FrozenSet[str] = field(default_factory=frozenset)
    dates: FrozenSet[date] = field(default_factory=frozenset)
    hours: FrozenSet[int] = field(default_factory=frozenset)
    include_virtual: bool = False
