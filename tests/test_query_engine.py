from datetime import date, datetime, timedelta, timezone

import pytest

from timetable.database.models import QueryCriteria
from timetable.query.engine import QueryEngine


def listing(store, engine, criteria):
    compiled = engine.compile(criteria)
    return [s.id for s in store.query(compiled.predicate, compiled.order_by)]


def test_default_lists_upcoming_non_virtual_classes_in_order(store, engine, make_session, now):
    store.replace_sessions([
        make_session("later", now + timedelta(hours=5)),
        make_session("past", now - timedelta(hours=1)),
        make_session("virtual", now + timedelta(hours=1), is_virtual=True),
        make_session("soon", now + timedelta(hours=1)),
        make_session("exactly-now", now),
    ])

    assert listing(store, engine, QueryCriteria()) == ["soon", "later"]


def test_same_start_time_is_ordered_by_id(store, engine, make_session, now):
    start = now + timedelta(hours=2)
    store.replace_sessions([make_session("b", start), make_session("a", start), make_session("c", start)])

    assert listing(store, engine, QueryCriteria()) == ["a", "b", "c"]


def test_include_virtual(store, engine, make_session, now):
    store.replace_sessions([
        make_session("studio", now + timedelta(hours=1)),
        make_session("virtual", now + timedelta(hours=2), is_virtual=True),
    ])

    assert listing(store, engine, QueryCriteria(include_virtual=True)) == ["studio", "virtual"]


def test_date_uses_reference_timezone_day(store, engine, make_session, nz):
    store.replace_sessions([
        # 11:30 UTC on 2 May
        make_session("late-on-2nd", datetime(2024, 5, 2, 23, 30, tzinfo=nz)),
        # 12:30 UTC on 2 May, but already the 3rd in Auckland
        make_session("early-on-3rd", datetime(2024, 5, 3, 0, 30, tzinfo=nz)),
        make_session("start-of-2nd", datetime(2024, 5, 2, 0, 0, tzinfo=nz)),
    ])

    result = listing(store, engine, QueryCriteria(dates=frozenset({date(2024, 5, 2)})))

    assert result == ["start-of-2nd", "late-on-2nd"]


def test_explicit_dates_show_past_classes(store, engine, make_session, nz):
    store.replace_sessions([make_session("last-month", datetime(2024, 4, 10, 9, 0, tzinfo=nz))])

    assert listing(store, engine, QueryCriteria(dates=frozenset({date(2024, 4, 10)}))) == ["last-month"]


def test_several_dates_are_or_ed(store, engine, make_session, nz):
    store.replace_sessions([
        make_session("2nd", datetime(2024, 5, 2, 9, 0, tzinfo=nz)),
        make_session("3rd", datetime(2024, 5, 3, 9, 0, tzinfo=nz)),
        make_session("4th", datetime(2024, 5, 4, 9, 0, tzinfo=nz)),
    ])

    dates = frozenset({date(2024, 5, 4), date(2024, 5, 2)})

    assert listing(store, engine, QueryCriteria(dates=dates)) == ["2nd", "4th"]


def test_hour_compares_reference_local_hour(store, engine, make_session, nz):
    store.replace_sessions([
        make_session("10:59", datetime(2024, 5, 2, 10, 59, tzinfo=nz)),
        make_session("11:00", datetime(2024, 5, 2, 11, 0, tzinfo=nz)),
        make_session("11:45", datetime(2024, 5, 3, 11, 45, tzinfo=nz)),
        make_session("12:00", datetime(2024, 5, 2, 12, 0, tzinfo=nz)),
        # 11:00 UTC
        make_session("23:00", datetime(2024, 5, 2, 23, 0, tzinfo=nz)),
    ])

    assert listing(store, engine, QueryCriteria(hours=frozenset({11}))) == ["11:00", "11:45"]


def test_clubs_and_hours_combine(store, engine, make_session, nz):
    eleven = datetime(2024, 5, 2, 11, 0, tzinfo=nz)
    store.replace_sessions([
        make_session("club01-11", eleven, club="01"),
        make_session("club13-11", eleven, club="13"),
        make_session("club01-09", datetime(2024, 5, 2, 9, 0, tzinfo=nz), club="01"),
    ])

    criteria = QueryCriteria(clubs=frozenset({"01", "09"}), hours=frozenset({11}))

    assert listing(store, engine, criteria) == ["club01-11"]


def test_names_are_or_ed(store, engine, make_session, now):
    store.replace_sessions([
        make_session("rpm", now + timedelta(hours=1), code="RPM"),
        make_session("pump", now + timedelta(hours=2), code="BODYPUMP"),
        make_session("grit", now + timedelta(hours=3), code="GRIT"),
    ])

    assert listing(store, engine, QueryCriteria(names=frozenset({"RPM", "GRIT"}))) == ["rpm", "grit"]


def test_unknown_club_matches_nothing(store, engine, make_session, now):
    store.replace_sessions([make_session("1", now + timedelta(hours=1))])

    assert listing(store, engine, QueryCriteria(clubs=frozenset({"99"}))) == []


def test_future_only_applies_without_dates(engine, now):
    without_dates, params = engine.compile(QueryCriteria()).predicate.to_sql()
    with_dates, _ = engine.compile(QueryCriteria(dates=frozenset({date(2024, 5, 1)}))).predicate.to_sql()

    assert "start_at > %s" in without_dates
    assert now in params
    assert "start_at > %s" not in with_dates


def test_compilation_is_deterministic(engine):
    first = QueryCriteria(names=frozenset({"RPM", "GRIT", "SPRINT"}), hours=frozenset({6, 18, 12}))
    second = QueryCriteria(names=frozenset({"SPRINT", "RPM", "GRIT"}), hours=frozenset({12, 6, 18}))

    assert engine.compile(first).predicate.to_sql() == engine.compile(second).predicate.to_sql()


def test_default_order(engine):
    assert engine.compile(QueryCriteria()).order_by == ("start_at", "id")


@pytest.mark.parametrize("day, hours", [
    (date(2024, 4, 7), 25),   # daylight saving ends
    (date(2024, 9, 29), 23),  # daylight saving starts
    (date(2024, 5, 1), 24),
])
def test_day_window_follows_daylight_saving(nz, now, day, hours):
    window = QueryEngine(nz, clock=lambda: now).day_window(day)

    elapsed = window.end.astimezone(timezone.utc) - window.start.astimezone(timezone.utc)

    assert elapsed == timedelta(hours=hours)
