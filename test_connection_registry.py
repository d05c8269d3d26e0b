"""Connection registry: idempotent add, tolerant remove, stable snapshots."""
from __future__ import annotations

from app.services.connection_registry import ConnectionRegistry, Session
from conftest import FakeWebSocket


def test_add_is_idempotent_per_session_id() -> None:
    registry = ConnectionRegistry()
    session = Session(websocket=FakeWebSocket())

    registry.add(session)
    registry.add(session)

    assert len(registry) == 1
    assert session in registry


def test_remove_missing_session_is_a_noop() -> None:
    registry = ConnectionRegistry()
    session = Session(websocket=FakeWebSocket())

    assert registry.remove(session) is False
    registry.add(session)
    assert registry.remove(session) is True
    assert registry.remove(session) is False
    assert len(registry) == 0


def test_sessions_get_distinct_ids_and_timestamps() -> None:
    a = Session(websocket=FakeWebSocket())
    b = Session(websocket=FakeWebSocket())
    assert a.id != b.id
    assert a.connected_at > 0


def test_snapshot_is_unaffected_by_later_mutation() -> None:
    registry = ConnectionRegistry()
    sessions = [Session(websocket=FakeWebSocket()) for _ in range(3)]
    for s in sessions:
        registry.add(s)

    snapshot = registry.all()
    registry.remove(sessions[0])
    registry.add(Session(websocket=FakeWebSocket()))

    assert {s.id for s in snapshot} == {s.id for s in sessions}
    assert len(registry) == 3
