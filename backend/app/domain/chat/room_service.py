"""Room management on top of the chat repository."""

from __future__ import annotations

import logging
from typing import List, Optional

from .exceptions import ChatValidationError, RoomNotFound
from .models import ChatRoom, Message
from .repo import ChatRepository
from .schemas import DirectRoomRequest, RoomCreateRequest

LOGGER = logging.getLogger(__name__)

_HISTORY_MAX_LIMIT = 200


class ChatRoomService:
	def __init__(self, repository: Optional[ChatRepository] = None) -> None:
		self._repository = repository if repository is not None else ChatRepository()

	async def list_rooms(self, student_id: Optional[str] = None) -> List[ChatRoom]:
		return await self._repository.list_rooms(student_id)

	async def get_room(self, room_id: str) -> ChatRoom:
		room = await self._repository.get_room(room_id)
		if room is None:
			raise RoomNotFound()
		return room

	async def create_room(self, payload: RoomCreateRequest) -> ChatRoom:
		room = await self._repository.create_room(
			name=payload.name.strip(),
			room_type=payload.type,
			members=payload.members,
			related_id=payload.related_id,
		)
		LOGGER.info("chat_room_created", extra={"room_id": room.id, "type": room.type})
		return room

	async def delete_room(self, room_id: str) -> None:
		if not await self._repository.delete_room(room_id):
			raise RoomNotFound()
		LOGGER.info("chat_room_deleted", extra={"room_id": room_id})

	async def get_or_create_direct(self, payload: DirectRoomRequest) -> ChatRoom:
		"""Return the direct room shared by two students, creating it on first use."""
		if payload.student1_id == payload.student2_id:
			raise ChatValidationError("cannot_message_self")
		existing = await self._repository.get_direct_room(payload.student1_id, payload.student2_id)
		if existing is not None:
			return existing
		return await self._repository.create_room(
			name=f"{payload.student1_name} & {payload.student2_name}",
			room_type="direct",
			members=[payload.student1_id, payload.student2_id],
		)

	async def history(self, room_id: str, *, after=None, limit: int = 50) -> List[Message]:
		await self.get_room(room_id)
		limit = max(1, min(limit, _HISTORY_MAX_LIMIT))
		return await self._repository.list_messages(room_id, after=after, limit=limit)
