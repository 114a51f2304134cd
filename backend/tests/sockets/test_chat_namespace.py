import json
from unittest.mock import AsyncMock

import pytest
import socketio

from app.domain.chat import ChatRepository, ChatTransport, ConnectionRegistry
from app.domain.chat.sockets import ChatNamespace


def _namespace() -> ChatNamespace:
	server = socketio.AsyncServer(async_mode="asgi")
	namespace = ChatNamespace(ChatTransport(registry=ConnectionRegistry()))
	server.register_namespace(namespace)
	namespace.emit = AsyncMock()
	return namespace


def _emitted(namespace: ChatNamespace, sid: str, event: str) -> list:
	return [
		call.args[1]
		for call in namespace.emit.await_args_list
		if call.args[0] == event and call.kwargs.get("room") == sid
	]


async def _room_id() -> str:
	room = await ChatRepository().create_room(name="Study", room_type="study", members=["alice", "bob"])
	return room.id


@pytest.mark.asyncio
async def test_join_acknowledges_and_registers():
	namespace = _namespace()
	await namespace.trigger_event("connect", "sid-1", {})

	await namespace.trigger_event("join", "sid-1", {"roomId": "r1"})

	assert _emitted(namespace, "sid-1", "joined") == [{"type": "joined", "roomId": "r1"}]
	assert namespace.transport.registry.room_of("sid-1") == "r1"


@pytest.mark.asyncio
async def test_message_fans_out_to_room_including_sender():
	namespace = _namespace()
	room_id = await _room_id()
	for sid in ("sid-1", "sid-2"):
		await namespace.trigger_event("connect", sid, {})
		await namespace.trigger_event("join", sid, {"roomId": room_id})

	await namespace.trigger_event(
		"message",
		"sid-1",
		{"senderId": "alice", "senderName": "Alice", "content": "hello room"},
	)

	first = _emitted(namespace, "sid-1", "message")
	second = _emitted(namespace, "sid-2", "message")
	assert len(first) == 1
	assert first == second
	assert first[0]["data"]["content"] == "hello room"
	assert first[0]["data"]["roomId"] == room_id
	stored = await ChatRepository().list_messages(room_id)
	assert len(stored) == 1
	assert stored[0].id == first[0]["data"]["id"]


@pytest.mark.asyncio
async def test_typed_text_frames_are_dispatched():
	namespace = _namespace()
	room_id = await _room_id()
	await namespace.trigger_event("connect", "sid-1", {})

	await namespace.trigger_event("message", "sid-1", json.dumps({"type": "join", "roomId": room_id}))
	await namespace.trigger_event(
		"message",
		"sid-1",
		json.dumps({"type": "message", "senderId": "bob", "senderName": "Bob", "content": "via send"}),
	)

	assert _emitted(namespace, "sid-1", "joined") == [{"type": "joined", "roomId": room_id}]
	frames = _emitted(namespace, "sid-1", "message")
	assert [frame["data"]["content"] for frame in frames] == ["via send"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
	"payload, reason",
	[
		("{not json", "invalid_json"),
		(json.dumps([1, 2, 3]), "frame_not_object"),
		({"type": "typing"}, "unknown_frame_type"),
		({"type": "join"}, "roomId_required"),
	],
)
async def test_malformed_frames_return_error_and_keep_connection(payload, reason):
	namespace = _namespace()
	await namespace.trigger_event("connect", "sid-1", {})

	await namespace.trigger_event("message", "sid-1", payload)

	assert _emitted(namespace, "sid-1", "error") == [{"type": "error", "message": reason}]
	assert namespace.transport.registry.get("sid-1") is not None


@pytest.mark.asyncio
async def test_message_before_join_is_rejected():
	namespace = _namespace()
	await namespace.trigger_event("connect", "sid-1", {})

	await namespace.trigger_event("message", "sid-1", {"senderId": "a", "senderName": "A", "content": "hi"})

	assert _emitted(namespace, "sid-1", "error") == [{"type": "error", "message": "join_required"}]


@pytest.mark.asyncio
async def test_empty_content_reports_error_without_broadcast():
	namespace = _namespace()
	room_id = await _room_id()
	for sid in ("sid-1", "sid-2"):
		await namespace.trigger_event("connect", sid, {})
		await namespace.trigger_event("join", sid, {"roomId": room_id})

	await namespace.trigger_event("message", "sid-1", {"senderId": "a", "senderName": "A", "content": "  "})

	assert _emitted(namespace, "sid-1", "error") == [{"type": "error", "message": "content_required"}]
	assert _emitted(namespace, "sid-2", "message") == []
	assert _emitted(namespace, "sid-2", "error") == []


@pytest.mark.asyncio
async def test_disconnect_removes_connection_and_prunes_room():
	namespace = _namespace()
	await namespace.trigger_event("connect", "sid-1", {})
	await namespace.trigger_event("join", "sid-1", {"roomId": "r1"})

	await namespace.trigger_event("disconnect", "sid-1")

	registry = namespace.transport.registry
	assert registry.get("sid-1") is None
	assert registry.rooms() == frozenset()
