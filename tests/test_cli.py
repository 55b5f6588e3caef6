import json
from dataclasses import replace
from datetime import timedelta

import pytest

from timetable import cli
from timetable.config import Settings
from timetable.database.store import PostgresCatalogStore
from timetable.factory import build_service
from timetable.refresh.scheduler import RefreshScheduler
from timetable.errors import UpstreamError


class FakeClient:
    def __init__(self, result):
        self.result = result

    def fetch(self):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


@pytest.fixture
def patched_service(monkeypatch, service):
    monkeypatch.setattr(cli, "build_service", lambda settings: service)
    monkeypatch.setattr(cli, "check_connection", lambda url: True)
    return service


def test_clubs(capsys):
    cli.main(["clubs"])

    out = capsys.readouterr().out
    assert "01  Auckland City" in out
    assert "06  Takapuna" in out


def test_classes_json(capsys, patched_service, store, make_session, now):
    store.replace_sessions([
        make_session("1", now + timedelta(hours=1), club="01"),
        make_session("2", now + timedelta(hours=2), club="13"),
    ])

    cli.main(["classes", "--club", "01", "--json"])

    listing = json.loads(capsys.readouterr().out)
    assert [c["ID"] for c in listing] == ["1"]
    assert listing[0]["Club"] == "01"


def test_classes_table(capsys, patched_service, store, make_session, now):
    store.replace_sessions([make_session("1", now + timedelta(hours=1), club="09")])

    cli.main(["classes"])

    out = capsys.readouterr().out
    assert "Bodypump @ Britomart" in out
    assert "1 classes" in out


def test_invalid_filter_exits_with_usage_error(capsys, patched_service):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["classes", "--date", "May 1st"])

    assert excinfo.value.code == 2
    assert "date" in capsys.readouterr().err


@pytest.mark.parametrize("populated, code", [(True, 0), (False, 1)])
def test_health_exit_code(patched_service, store, make_session, now, populated, code):
    if populated:
        store.replace_sessions([make_session("1", now)])

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["health"])

    assert excinfo.value.code == code


def test_health_fails_when_database_is_unreachable(monkeypatch, capsys, patched_service, store, make_session, now):
    store.replace_sessions([make_session("1", now)])
    monkeypatch.setattr(cli, "check_connection", lambda url: False)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["health"])

    assert excinfo.value.code == 1
    assert "Database unreachable" in capsys.readouterr().out


def test_read_commands_do_not_create_the_schema(monkeypatch):
    def fail_ensure_schema(self):
        raise AssertionError("ensure_schema called")

    monkeypatch.setattr(PostgresCatalogStore, "ensure_schema", fail_ensure_schema)
    settings = Settings.from_env()
    settings = replace(settings, database_url="postgresql://test/classes")

    service = build_service(settings)

    assert isinstance(service.store, PostgresCatalogStore)


@pytest.mark.parametrize("upstream, code", [
    (([], []), 0),
    (UpstreamError("timeout"), 1),
])
def test_refresh_exit_code(monkeypatch, capsys, store, nz, upstream, code):
    scheduler = RefreshScheduler(FakeClient(upstream), store, nz)
    monkeypatch.setattr(cli, "build_scheduler", lambda settings: scheduler)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["refresh"])

    assert excinfo.value.code == code
    if code:
        assert "fetching" in capsys.readouterr().out
