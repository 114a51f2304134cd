import pytest

from app.domain.chat.exceptions import ConnectionClosed
from app.domain.chat.registry import ConnectionRegistry, ConnectionState


def test_connect_starts_unsubscribed():
	registry = ConnectionRegistry()

	connection = registry.connect("c1")

	assert connection.state is ConnectionState.UNSUBSCRIBED
	assert connection.room_id is None
	assert len(registry) == 1
	assert registry.rooms() == frozenset()


def test_resubscribe_moves_connection_and_prunes_old_room():
	registry = ConnectionRegistry()
	registry.connect("c1")
	registry.connect("c2")
	registry.subscribe("c1", "r1")
	registry.subscribe("c2", "r1")

	left = registry.subscribe("c1", "r2")

	assert left == "r1"
	assert registry.subscribers("r1") == {"c2"}
	assert registry.subscribers("r2") == {"c1"}
	assert registry.room_of("c1") == "r2"
	assert registry.get("c1").state is ConnectionState.SUBSCRIBED


def test_close_deregisters_and_prunes_empty_room():
	registry = ConnectionRegistry()
	registry.connect("c1")
	registry.subscribe("c1", "r1")

	closed = registry.close("c1")

	assert closed.state is ConnectionState.CLOSED
	assert registry.subscribers("r1") == frozenset()
	assert "r1" not in registry.rooms()
	assert len(registry) == 0
	assert registry.close("c1") is None


def test_closed_connection_cannot_subscribe():
	registry = ConnectionRegistry()
	registry.connect("c1")
	registry.close("c1")

	with pytest.raises(ConnectionClosed):
		registry.subscribe("c1", "r1")


def test_unsubscribe_returns_to_unsubscribed():
	registry = ConnectionRegistry()
	registry.connect("c1")
	registry.subscribe("c1", "r1")

	assert registry.unsubscribe("c1") == "r1"
	assert registry.get("c1").state is ConnectionState.UNSUBSCRIBED
	assert registry.rooms() == frozenset()
	assert registry.unsubscribe("c1") is None


def test_repeated_connect_disconnect_cycles_do_not_leak():
	registry = ConnectionRegistry()
	for cycle in range(50):
		sid = f"sid-{cycle}"
		registry.connect(sid)
		registry.subscribe(sid, f"room-{cycle % 3}")
		registry.close(sid)

	assert len(registry) == 0
	assert registry.rooms() == frozenset()


def test_subscribers_returns_snapshot():
	registry = ConnectionRegistry()
	registry.connect("c1")
	registry.subscribe("c1", "r1")
	snapshot = registry.subscribers("r1")

	registry.close("c1")

	assert snapshot == {"c1"}
	assert registry.subscribers("r1") == frozenset()
