"""
Normalizer

Maps raw timetable records into catalog entities. A batch either normalizes
completely or fails; a bad record never drops out on its own.
"""

from datetime import datetime, tzinfo
from typing import Any, Dict, Iterable, List

from ..database.models import ClassSession, ClassType
from ..errors import MalformedRecordError


def _require(raw: Dict[str, Any], key: str) -> Any:
    if key not in raw or raw[key] is None:
        raise MalformedRecordError(f"Record is missing {key!r}")
    return raw[key]


def _identifier(raw: Dict[str, Any], key: str) -> str:
    """Return a non-empty string identifier; numeric ids are stringified."""
    value = _require(raw, key)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MalformedRecordError(f"{key!r} must be a string, got {type(value).__name__}")
    value = str(value).strip()
    if not value:
        raise MalformedRecordError(f"{key!r} is empty")
    return value


def _text(raw: Dict[str, Any], key: str) -> str:
    value = _require(raw, key)
    if not isinstance(value, str):
        raise MalformedRecordError(f"{key!r} must be a string, got {type(value).__name__}")
    if not value.strip():
        raise MalformedRecordError(f"{key!r} is empty")
    return value


def _timestamp(raw: Dict[str, Any], key: str, tz: tzinfo) -> datetime:
    value = _text(raw, key)
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise MalformedRecordError(f"{key!r} is not an ISO 8601 timestamp: {value!r}") from None
    if parsed.tzinfo is None:
        # No offset: the provider publishes club-local wall time
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def normalize_session(raw: Any, tz: tzinfo) -> ClassSession:
    """
    Map one raw class record to a ClassSession.

    Args:
        raw: Record from the provider's "Classes" array
        tz: Reference timezone, used for timestamps without an offset

    Raises:
        MalformedRecordError: if a required field is absent or untypeable
    """
    if not isinstance(raw, dict):
        raise MalformedRecordError(f"Class record must be an object, got {type(raw).__name__}")

    club = _require(raw, "Club")
    if not isinstance(club, dict):
        raise MalformedRecordError("'Club' must be an object")

    start_at = _timestamp(raw, "StartDateTime", tz)
    end_at = _timestamp(raw, "EndDateTime", tz)
    if end_at <= start_at:
        raise MalformedRecordError(
            f"Class {raw.get('ClassInstanceId')!r} ends at or before it starts"
        )

    is_virtual = _require(raw, "IsVirtualClass")
    if not isinstance(is_virtual, bool):
        raise MalformedRecordError("'IsVirtualClass' must be a boolean")

    duration = raw.get("Duration")
    if duration is None:
        duration = int((end_at - start_at).total_seconds() // 60)
    elif isinstance(duration, bool) or not isinstance(duration, int):
        raise MalformedRecordError("'Duration' must be an integer")
    elif duration < 0:
        raise MalformedRecordError("'Duration' must not be negative")

    description = raw.get("ClassDescription")
    if description is None:
        description = ""
    elif not isinstance(description, str):
        raise MalformedRecordError("'ClassDescription' must be a string")

    return ClassSession(
        id=_identifier(raw, "ClassInstanceId"),
        name=_text(raw, "ClassName"),
        code=_identifier(raw, "ClassCode"),
        club=_identifier(club, "ClubCode"),
        description=description,
        duration_minutes=duration,
        start_at=start_at,
        end_at=end_at,
        is_virtual=is_virtual,
    )


def normalize_class_type(raw: Any) -> ClassType:
    """Map one raw record from the provider's "ClassType" array."""
    if not isinstance(raw, dict):
        raise MalformedRecordError(f"Class type record must be an object, got {type(raw).__name__}")
    return ClassType(id=_identifier(raw, "Key"), name=_text(raw, "Value"))


def normalize_sessions(raws: Iterable[Any], tz: tzinfo) -> List[ClassSession]:
    """Normalize a whole batch of class records, rejecting duplicate ids."""
    sessions = []
    seen = set()
    for index, raw in enumerate(raws):
        try:
            session = normalize_session(raw, tz)
        except MalformedRecordError as e:
            raise MalformedRecordError(f"Class record {index}: {e}") from e
        if session.id in seen:
            raise MalformedRecordError(f"Class record {index}: duplicate id {session.id!r}")
        seen.add(session.id)
        sessions.append(session)
    return sessions


def normalize_class_types(raws: Iterable[Any]) -> List[ClassType]:
    """Normalize a whole batch of class type records, rejecting duplicate ids."""
    class_types = []
    seen = set()
    for index, raw in enumerate(raws):
        try:
            class_type = normalize_class_type(raw)
        except MalformedRecordError as e:
            raise MalformedRecordError(f"Class type record {index}: {e}") from e
        if class_type.id in seen:
            raise MalformedRecordError(f"Class type record {index}: duplicate id {class_type.id!r}")
        seen.add(class_type.id)
        class_types.append(class_type)
    return class_types
