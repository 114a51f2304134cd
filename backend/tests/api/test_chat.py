from unittest.mock import AsyncMock

import pytest

from app.domain.chat import ChatRepository
from app.domain.chat.exceptions import ChatStoreError
from app.main import app


async def _create_room(api_client, **overrides) -> dict:
	payload = {"name": "Algorithms Study", "type": "study", "members": ["alice", "bob"]}
	payload.update(overrides)
	response = await api_client.post("/chat/rooms", json=payload)
	assert response.status_code == 201
	return response.json()


def _message(room_id: str, content: str = "hello") -> dict:
	return {"roomId": room_id, "senderId": "alice", "senderName": "Alice", "content": content}


@pytest.mark.asyncio
async def test_compose_persists_and_reaches_socket_subscribers(api_client):
	room = await _create_room(api_client)
	transport = app.state.chat_transport
	sender = AsyncMock()
	original = transport._sender
	transport.bind_sender(sender)
	transport.connect("sid-http")
	await transport.subscribe("sid-http", room["id"])
	sender.reset_mock()
	try:
		response = await api_client.post("/chat/messages", json=_message(room["id"]))
	finally:
		transport.close("sid-http")
		transport._sender = original

	assert response.status_code == 201
	body = response.json()
	assert body["roomId"] == room["id"]
	assert body["senderName"] == "Alice"
	sender.assert_awaited_once()
	sid, event, frame = sender.await_args.args
	assert (sid, event) == ("sid-http", "message")
	assert frame["data"]["id"] == body["id"]


@pytest.mark.asyncio
async def test_compose_without_subscribers_still_persists(api_client):
	room = await _create_room(api_client)

	response = await api_client.post("/chat/messages", json=_message(room["id"], "anyone here?"))
	history = await api_client.get(f"/chat/rooms/{room['id']}/messages")

	assert response.status_code == 201
	assert history.status_code == 200
	assert [item["content"] for item in history.json()["items"]] == ["anyone here?"]


@pytest.mark.asyncio
async def test_compose_validation_and_missing_room(api_client):
	room = await _create_room(api_client)

	empty = await api_client.post("/chat/messages", json=_message(room["id"], ""))
	missing = await api_client.post("/chat/messages", json=_message("no-such-room"))

	assert empty.status_code == 400
	assert empty.json()["detail"] == "content_required"
	assert missing.status_code == 404
	assert missing.json()["detail"] == "room_not_found"
	history = await api_client.get(f"/chat/rooms/{room['id']}/messages")
	assert history.json()["items"] == []


@pytest.mark.asyncio
async def test_compose_store_failure_is_unavailable(api_client, monkeypatch):
	room = await _create_room(api_client)
	monkeypatch.setattr(ChatRepository, "create_message", AsyncMock(side_effect=ChatStoreError()))

	response = await api_client.post("/chat/messages", json=_message(room["id"]))

	assert response.status_code == 503
	assert response.json()["detail"] == "store_unavailable"


@pytest.mark.asyncio
async def test_rooms_listing_orders_by_latest_message(api_client):
	quiet = await _create_room(api_client, name="Quiet")
	older = await _create_room(api_client, name="Older")
	newer = await _create_room(api_client, name="Newer")
	await _create_room(api_client, name="Elsewhere", members=["carol"])
	await api_client.post("/chat/messages", json=_message(older["id"], "first"))
	await api_client.post("/chat/messages", json=_message(newer["id"], "second"))

	response = await api_client.get("/chat/rooms", params={"studentId": "alice"})

	assert response.status_code == 200
	rooms = response.json()
	assert [item["id"] for item in rooms] == [newer["id"], older["id"], quiet["id"]]
	assert rooms[0]["lastMessage"] == "second"
	assert rooms[2]["lastMessage"] is None


@pytest.mark.asyncio
async def test_room_get_and_delete(api_client):
	room = await _create_room(api_client, type="event", relatedId="event-1")

	fetched = await api_client.get(f"/chat/rooms/{room['id']}")
	assert fetched.status_code == 200
	assert fetched.json()["relatedId"] == "event-1"

	deleted = await api_client.delete(f"/chat/rooms/{room['id']}")
	assert deleted.status_code == 204
	again = await api_client.delete(f"/chat/rooms/{room['id']}")
	assert again.status_code == 404
	gone = await api_client.get(f"/chat/rooms/{room['id']}")
	assert gone.status_code == 404


@pytest.mark.asyncio
async def test_create_room_rejects_unknown_type(api_client):
	response = await api_client.post("/chat/rooms", json={"name": "Bad", "type": "broadcast"})

	assert response.status_code == 422


@pytest.mark.asyncio
async def test_direct_room_is_created_once(api_client):
	payload = {
		"student1Id": "alice",
		"student2Id": "bob",
		"student1Name": "Alice",
		"student2Name": "Bob",
	}

	first = await api_client.post("/chat/rooms/direct", json=payload)
	reversed_payload = {
		"student1Id": "bob",
		"student2Id": "alice",
		"student1Name": "Bob",
		"student2Name": "Alice",
	}
	second = await api_client.post("/chat/rooms/direct", json=reversed_payload)

	assert first.status_code == 200
	room = first.json()
	assert room["name"] == "Alice & Bob"
	assert room["type"] == "direct"
	assert room["members"] == ["alice", "bob"]
	assert second.json()["id"] == room["id"]


@pytest.mark.asyncio
async def test_history_unknown_room_is_not_found(api_client):
	response = await api_client.get("/chat/rooms/missing/messages")

	assert response.status_code == 404


@pytest.mark.asyncio
async def test_health_and_metrics(api_client):
	live = await api_client.get("/health/live")
	metrics = await api_client.get("/metrics")

	assert live.json() == {"status": "ok"}
	assert metrics.status_code == 200
	assert "campus_chat_active_rooms" in metrics.text
