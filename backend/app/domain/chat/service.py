"""Chat transport: persist a composed message, then fan it out to the room."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional

from app.obs import metrics as obs_metrics
from app.settings import settings

from .exceptions import ChatError, ChatValidationError, ConnectionClosed, NotSubscribed, RoomNotFound
from .models import Message
from .registry import Connection, ConnectionRegistry
from .repo import ChatRepository
from .schemas import ComposeMessageRequest

LOGGER = logging.getLogger(__name__)

FrameSender = Callable[[str, str, dict], Awaitable[None]]


class _RoomSequencer:
	"""Per-room locks, created on demand and dropped once nobody waits on them."""

	def __init__(self) -> None:
		self._locks: Dict[str, asyncio.Lock] = {}
		self._waiters: Dict[str, int] = {}

	@asynccontextmanager
	async def hold(self, room_id: str) -> AsyncIterator[None]:
		lock = self._locks.setdefault(room_id, asyncio.Lock())
		self._waiters[room_id] = self._waiters.get(room_id, 0) + 1
		try:
			async with lock:
				yield
		finally:
			remaining = self._waiters[room_id] - 1
			if remaining:
				self._waiters[room_id] = remaining
			else:
				del self._waiters[room_id]
				del self._locks[room_id]

	def __len__(self) -> int:
		return len(self._locks)


def message_frame(message: Message) -> dict:
	return {"type": "message", "data": message.to_dict()}


def joined_frame(room_id: str) -> dict:
	return {"type": "joined", "roomId": room_id}


def error_frame(reason: str) -> dict:
	return {"type": "error", "message": reason}


class ChatTransport:
	def __init__(
		self,
		repository: Optional[ChatRepository] = None,
		registry: Optional[ConnectionRegistry] = None,
		sender: Optional[FrameSender] = None,
	) -> None:
		self.repository = repository if repository is not None else ChatRepository()
		self.registry = registry if registry is not None else ConnectionRegistry()
		self._sender = sender
		self._sequencer = _RoomSequencer()

	def bind_sender(self, sender: FrameSender) -> None:
		self._sender = sender

	def connect(self, sid: str) -> Connection:
		return self.registry.connect(sid)

	async def subscribe(self, sid: str, room_id: str) -> None:
		room_id = (room_id or "").strip()
		if not room_id:
			raise ChatValidationError("room_id_required")
		self.registry.subscribe(sid, room_id)
		obs_metrics.set_chat_active_rooms(len(self.registry.rooms()))
		LOGGER.info("chat_room_joined", extra={"sid": sid, "room_id": room_id})
		await self._send(sid, "joined", joined_frame(room_id))

	def close(self, sid: str) -> None:
		connection = self.registry.close(sid)
		if connection is not None:
			obs_metrics.set_chat_active_rooms(len(self.registry.rooms()))

	async def compose_from(self, sid: str, *, sender_id: str, sender_name: str, content: str) -> Message:
		"""Compose into the room ``sid`` is currently subscribed to."""
		connection = self.registry.get(sid)
		if connection is None:
			raise ConnectionClosed()
		room_id = connection.room_id
		if room_id is None:
			raise NotSubscribed()
		request = ComposeMessageRequest(
			room_id=room_id,
			sender_id=sender_id,
			sender_name=sender_name,
			content=content,
		)
		return await self.compose(request, source="socket")

	async def compose(self, request: ComposeMessageRequest, *, source: str = "http") -> Message:
		"""Validate, persist once, then broadcast to every subscriber of the room.

		Nothing is sent when validation or persistence fails. Persist and
		broadcast run under the room's sequencer, so subscribers observe
		messages in the order they were stored.
		"""
		try:
			_validate(request)
			room = await self.repository.get_room(request.room_id)
			if room is None:
				raise RoomNotFound()
			async with self._sequencer.hold(request.room_id):
				message = await self.repository.create_message(
					room_id=request.room_id,
					sender_id=request.sender_id,
					sender_name=request.sender_name,
					content=request.content,
				)
				obs_metrics.inc_chat_send(source)
				await self._broadcast(message)
		except ChatError as exc:
			obs_metrics.inc_chat_send_failure(exc.reason)
			raise
		return message

	async def _broadcast(self, message: Message) -> None:
		targets = self.registry.subscribers(message.room_id)
		frame = message_frame(message)
		delivered = 0
		for sid in sorted(targets):
			if await self._send(sid, "message", frame):
				delivered += 1
		obs_metrics.inc_chat_delivered(delivered)
		LOGGER.info(
			"chat_message_broadcast",
			extra={"room_id": message.room_id, "message_id": message.id, "subscribers": len(targets), "delivered": delivered},
		)

	async def _send(self, sid: str, event: str, frame: dict) -> bool:
		if self._sender is None:
			return False
		try:
			await self._sender(sid, event, frame)
		except Exception:  # noqa: BLE001 - do not halt on one failed delivery
			LOGGER.warning("chat_delivery_failed", extra={"sid": sid, "event": event}, exc_info=True)
			return False
		return True


def _validate(request: ComposeMessageRequest) -> None:
	if not (request.room_id or "").strip():
		raise ChatValidationError("room_id_required")
	if not (request.sender_id or "").strip():
		raise ChatValidationError("sender_id_required")
	if not (request.sender_name or "").strip():
		raise ChatValidationError("sender_name_required")
	if not (request.content or "").strip():
		raise ChatValidationError("content_required")
	if len(request.content) > settings.chat_body_max_length:
		raise ChatValidationError("content_too_long")
