"""
Criteria parsing for caller-supplied filter parameters.

Parameters arrive as strings, e.g. from a query string or the command line:
``name=BODYPUMP,RPM&club=01,09&date=2024-05-01&hour=6,18&virtual=true``.
"""

import re
from datetime import date, datetime
from typing import List, Mapping, Optional

from ..database.models import QueryCriteria
from ..errors import InvalidQueryError

TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
HOUR_PATTERN = re.compile(r"[+-]?[0-9]+")


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated parameter, dropping blank items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_date(value: str) -> date:
    if not DATE_PATTERN.fullmatch(value):
        raise InvalidQueryError("date", f"{value!r} is not a YYYY-MM-DD date")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidQueryError("date", f"{value!r} is not a YYYY-MM-DD date") from None


def parse_hour(value: str) -> int:
    if not HOUR_PATTERN.fullmatch(value):
        raise InvalidQueryError("hour", f"{value!r} is not an integer")
    hour = int(value)
    if not 0 <= hour <= 23:
        raise InvalidQueryError("hour", f"{hour} is outside 0-23")
    return hour


def parse_bool(value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise InvalidQueryError("virtual", f"{value!r} is not a boolean")


def parse_criteria(params: Mapping[str, Optional[str]]) -> QueryCriteria:
    """
    Build QueryCriteria from string parameters.

    Args:
        params: Mapping with optional keys name, club, date, hour and virtual

    Raises:
        InvalidQueryError: if a date, hour or virtual value cannot be parsed
    """
    virtual = (params.get("virtual") or "").strip()
    return QueryCriteria(
        names=frozenset(split_list(params.get("name"))),
        clubs=frozenset(split_list(params.get("club"))),
        dates=frozenset(parse_date(d) for d in split_list(params.get("date"))),
        hours=frozenset(parse_hour(h) for h in split_list(params.get("hour"))),
        include_virtual=parse_bool(virtual) if virtual else False,
    )
