import time

import pytest
from fastapi import HTTPException

from careers.ee import EventEmitter
from careers.jobs import FilterCriteria
from careers.sessions import (
    createSession, expire_sessions, flash, getSession, pop_flashes, sessions, updateFilter,
)


@pytest.fixture(autouse=True)
def clean_sessions():
    yield
    sessions.clear()


def test_new_session_has_default_filter():
    session = getSession(session_id=createSession())
    assert session.filter == FilterCriteria()
    assert session.csrfToken


def test_unknown_session_is_rejected():
    with pytest.raises(HTTPException) as exc:
        getSession(session_id="missing")
    assert exc.value.status_code == 400
    with pytest.raises(HTTPException):
        getSession(session_id=None)


def test_update_filter_notifies_listeners():
    session_id = createSession()
    seen = []
    getSession(session_id=session_id).bus.on("update", lambda: seen.append(getSession(session_id=session_id).filter))
    criteria = FilterCriteria(location="Remote")
    updateFilter(session_id=session_id, slug="acme", filter=criteria)
    assert seen == [criteria]
    assert getSession(session_id=session_id).slug == "acme"


def test_flashes_are_shown_once():
    session_id = createSession()
    flash(session_id=session_id, message="Saved", level="success")
    assert [(f.message, f.level) for f in pop_flashes(session_id=session_id)] == [("Saved", "success")]
    assert pop_flashes(session_id=session_id) == []


def test_expire_sessions():
    old = createSession()
    fresh = createSession()
    getSession(session_id=old).last_seen = 0
    assert expire_sessions(now=time.time()) == [old]
    assert old not in sessions
    assert fresh in sessions


def test_event_emitter():
    bus = EventEmitter()
    calls = []
    handler = lambda *args: calls.append(args)
    bus.on("update", handler)
    bus.emit("update", 1)
    bus.off("update", handler)
    bus.off("update", handler)
    bus.emit("update", 2)
    assert calls == [(1,)]
