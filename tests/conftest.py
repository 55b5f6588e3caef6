from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from timetable.database.models import ClassSession, ClassType
from timetable.database.store import MemoryCatalogStore
from timetable.query.engine import QueryEngine
from timetable.service import TimetableService

NZ = ZoneInfo("Pacific/Auckland")


@pytest.fixture
def nz():
    return NZ


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=NZ)


@pytest.fixture
def make_session():
    def _make(session_id, start_at, *, club="01", code="BODYPUMP", is_virtual=False, duration=55):
        return ClassSession(
            id=session_id,
            name=code.title(),
            code=code,
            club=club,
            description="",
            duration_minutes=duration,
            start_at=start_at,
            end_at=start_at + timedelta(minutes=duration),
            is_virtual=is_virtual,
        )
    return _make


@pytest.fixture
def class_types():
    return [ClassType("RPM", "RPM™"), ClassType("BODYPUMP", "BODYPUMP™")]


@pytest.fixture
def engine(now):
    return QueryEngine(NZ, clock=lambda: now)


@pytest.fixture
def store():
    return MemoryCatalogStore()


@pytest.fixture
def service(store, engine):
    return TimetableService(store, engine)


@pytest.fixture
def raw_class():
    return {
        "ClassInstanceId": "a1b2c3",
        "ClassName": "BODYPUMP™",
        "ClassCode": "BODYPUMP",
        "Club": {"ClubCode": "01", "Name": "Auckland City"},
        "ClassDefinitionId": "def-1",
        "ClassDescription": "The original barbell class",
        "Duration": 55,
        "StartDateTime": "2024-05-01T06:00:00+12:00",
        "EndDateTime": "2024-05-01T06:55:00+12:00",
        "IsVirtualClass": False,
        "MainInstructor": {"InstructorId": "i1", "Name": "Sam"},
        "Site": {"Capacity": 40, "SiteId": "s1", "SiteName": "Studio 1"},
        "Status": "Active",
    }
