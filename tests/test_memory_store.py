from datetime import timedelta

import pytest

from timetable.database.models import ClassType
from timetable.errors import StoreError
from timetable.query.predicates import MATCH_ALL

ORDER = ("start_at", "id")


def test_empty_store(store):
    assert not store.is_populated()
    assert store.query(MATCH_ALL, ORDER) == []
    assert store.all_types() == []


def test_replace_installs_a_new_generation(store, make_session, now):
    store.replace_sessions([make_session("old", now)])
    store.replace_sessions([make_session("new-2", now + timedelta(hours=1)), make_session("new-1", now)])

    assert [s.id for s in store.query(MATCH_ALL, ORDER)] == ["new-1", "new-2"]
    assert store.is_populated()


def test_replace_is_idempotent(store, make_session, now, class_types):
    sessions = [make_session(str(i), now + timedelta(hours=i)) for i in range(3)]

    store.replace_catalog(sessions, class_types)
    once = (store.query(MATCH_ALL, ORDER), store.all_types())
    store.replace_catalog(sessions, class_types)
    twice = (store.query(MATCH_ALL, ORDER), store.all_types())

    assert once == twice


def test_failed_replace_keeps_previous_generation(store, make_session, now, class_types):
    store.replace_catalog([make_session("kept", now)], class_types)

    with pytest.raises(StoreError):
        store.replace_sessions([make_session("dup", now), make_session("dup", now)])

    assert [s.id for s in store.query(MATCH_ALL, ORDER)] == ["kept"]
    assert store.all_types() == sorted(class_types, key=lambda t: t.id)


def test_replace_catalog_is_all_or_nothing(store, make_session, now, class_types):
    store.replace_catalog([make_session("kept", now)], class_types)

    with pytest.raises(StoreError):
        store.replace_catalog(
            [make_session("new", now)],
            [ClassType("RPM", "a"), ClassType("RPM", "b")],
        )

    assert [s.id for s in store.query(MATCH_ALL, ORDER)] == ["kept"]


def test_replace_with_empty_generation_clears(store, make_session, now):
    store.replace_sessions([make_session("1", now)])
    store.replace_sessions([])

    assert not store.is_populated()


def test_all_types_sorted_by_id(store, class_types):
    store.replace_types(class_types)

    assert [t.id for t in store.all_types()] == ["BODYPUMP", "RPM"]
