"""Message & room store backed by asyncpg with an in-memory fallback."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import asyncpg
import ulid

from app.infra.postgres import pool_or_none

from .exceptions import ChatStoreError, RoomNotFound
from .models import ChatRoom, Message


class _InMemoryStore:
	"""Fallback store used in tests when Postgres is unavailable."""

	def __init__(self) -> None:
		self._lock = asyncio.Lock()
		self.rooms: Dict[str, ChatRoom] = {}
		self.messages: Dict[str, List[Message]] = {}

	async def create_room(self, room: ChatRoom) -> ChatRoom:
		async with self._lock:
			self.rooms[room.id] = room
			self.messages.setdefault(room.id, [])
			return room

	async def get_room(self, room_id: str) -> Optional[ChatRoom]:
		async with self._lock:
			return self.rooms.get(room_id)

	async def list_rooms(self, student_id: Optional[str]) -> List[ChatRoom]:
		async with self._lock:
			rooms = list(self.rooms.values())
		if student_id is None:
			return rooms
		owned = [room for room in rooms if room.has_member(student_id)]
		epoch = datetime.min.replace(tzinfo=timezone.utc)
		owned.sort(
			key=lambda room: (room.last_message_time is not None, room.last_message_time or epoch),
			reverse=True,
		)
		return owned

	async def delete_room(self, room_id: str) -> bool:
		async with self._lock:
			self.messages.pop(room_id, None)
			return self.rooms.pop(room_id, None) is not None

	async def find_direct(self, first: str, second: str) -> Optional[ChatRoom]:
		async with self._lock:
			for room in self.rooms.values():
				if room.type == "direct" and room.has_member(first) and room.has_member(second):
					return room
			return None

	async def insert_message(
		self,
		room_id: str,
		sender_id: str,
		sender_name: str,
		content: str,
	) -> Message:
		async with self._lock:
			room = self.rooms.get(room_id)
			if room is None:
				raise RoomNotFound()
			history = self.messages.setdefault(room_id, [])
			created_at = datetime.now(timezone.utc)
			if history and history[-1].created_at > created_at:
				created_at = history[-1].created_at
			message = Message(
				id=str(ulid.new()),
				room_id=room_id,
				sender_id=sender_id,
				sender_name=sender_name,
				content=content,
				created_at=created_at,
			)
			history.append(message)
			room.last_message = content
			room.last_message_time = created_at
			return message

	async def list_messages(self, room_id: str) -> List[Message]:
		async with self._lock:
			return list(self.messages.get(room_id, []))


_MEMORY = _InMemoryStore()


@contextmanager
def _store_errors() -> Iterator[None]:
	try:
		yield
	except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
		raise ChatStoreError() from exc


def _row_to_room(row: asyncpg.Record) -> ChatRoom:
	return ChatRoom(
		id=str(row["id"]),
		name=row["name"],
		type=row["type"],
		related_id=row["related_id"],
		members=tuple(row["members"] or ()),
		last_message=row["last_message"],
		last_message_time=row["last_message_time"],
		created_at=row["created_at"],
	)


def _row_to_message(row: asyncpg.Record) -> Message:
	return Message(
		id=str(row["id"]),
		room_id=str(row["room_id"]),
		sender_id=str(row["sender_id"]),
		sender_name=row["sender_name"],
		content=row["content"],
		created_at=row["created_at"],
	)


class ChatRepository:
	"""Message/room store consumed by the chat transport."""

	def __init__(self) -> None:
		self._pool_checked = False
		self._pool: Optional[asyncpg.Pool] = None

	async def _pool_or_none(self) -> Optional[asyncpg.Pool]:
		if self._pool_checked:
			return self._pool
		self._pool_checked = True
		self._pool = await pool_or_none()
		return self._pool

	async def create_message(
		self,
		*,
		room_id: str,
		sender_id: str,
		sender_name: str,
		content: str,
	) -> Message:
		"""Insert one message and refresh the room's last-message cache atomically."""
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.insert_message(room_id, sender_id, sender_name, content)
		with _store_errors():
			async with pool.acquire() as conn:
				async with conn.transaction():
					created_at = datetime.now(timezone.utc)
					updated = await conn.fetchval(
						"""
						UPDATE chat_rooms
						SET last_message = $2, last_message_time = $3
						WHERE id = $1
						RETURNING id
						""",
						room_id,
						content,
						created_at,
					)
					if updated is None:
						raise RoomNotFound()
					row = await conn.fetchrow(
						"""
						INSERT INTO messages (id, room_id, sender_id, sender_name, content, created_at)
						VALUES ($1, $2, $3, $4, $5, $6)
						RETURNING *
						""",
						str(ulid.new()),
						room_id,
						sender_id,
						sender_name,
						content,
						created_at,
					)
		return _row_to_message(row)

	async def list_messages(
		self,
		room_id: str,
		*,
		after: Optional[datetime] = None,
		limit: int = 100,
	) -> List[Message]:
		"""Return the newest ``limit`` messages (after ``after`` when given), oldest first."""
		pool = await self._pool_or_none()
		if pool is None:
			history = await _MEMORY.list_messages(room_id)
			if after is not None:
				history = [message for message in history if message.created_at > after]
			return history[-limit:]
		with _store_errors():
			async with pool.acquire() as conn:
				if after is None:
					rows = await conn.fetch(
						"SELECT * FROM messages WHERE room_id = $1 ORDER BY created_at DESC, id DESC LIMIT $2",
						room_id,
						limit,
					)
				else:
					rows = await conn.fetch(
						"""
						SELECT * FROM messages
						WHERE room_id = $1 AND created_at > $2
						ORDER BY created_at DESC, id DESC
						LIMIT $3
						""",
						room_id,
						after,
						limit,
					)
		return [_row_to_message(row) for row in reversed(rows)]

	async def get_room(self, room_id: str) -> Optional[ChatRoom]:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.get_room(room_id)
		with _store_errors():
			async with pool.acquire() as conn:
				row = await conn.fetchrow("SELECT * FROM chat_rooms WHERE id = $1", room_id)
		return _row_to_room(row) if row else None

	async def get_room_members(self, room_id: str) -> Tuple[str, ...]:
		room = await self.get_room(room_id)
		if room is None:
			raise RoomNotFound()
		return room.members

	async def create_room(
		self,
		*,
		name: str,
		room_type: str,
		members: Sequence[str],
		related_id: Optional[str] = None,
	) -> ChatRoom:
		room_id = str(ulid.new())
		ordered = tuple(dict.fromkeys(members))
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.create_room(
				ChatRoom(
					id=room_id,
					name=name,
					type=room_type,
					related_id=related_id,
					members=ordered,
					created_at=datetime.now(timezone.utc),
				)
			)
		with _store_errors():
			async with pool.acquire() as conn:
				row = await conn.fetchrow(
					"""
					INSERT INTO chat_rooms (id, name, type, related_id, members)
					VALUES ($1, $2, $3, $4, $5)
					RETURNING *
					""",
					room_id,
					name,
					room_type,
					related_id,
					list(ordered),
				)
		return _row_to_room(row)

	async def list_rooms(self, student_id: Optional[str] = None) -> List[ChatRoom]:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.list_rooms(student_id)
		with _store_errors():
			async with pool.acquire() as conn:
				if student_id is None:
					rows = await conn.fetch("SELECT * FROM chat_rooms ORDER BY created_at ASC")
				else:
					rows = await conn.fetch(
						"""
						SELECT * FROM chat_rooms
						WHERE $1 = ANY(members)
						ORDER BY last_message_time DESC NULLS LAST
						""",
						student_id,
					)
		return [_row_to_room(row) for row in rows]

	async def delete_room(self, room_id: str) -> bool:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.delete_room(room_id)
		with _store_errors():
			async with pool.acquire() as conn:
				async with conn.transaction():
					await conn.execute("DELETE FROM messages WHERE room_id = $1", room_id)
					result = await conn.execute("DELETE FROM chat_rooms WHERE id = $1", room_id)
		return result.endswith(" 1")

	async def get_direct_room(self, first: str, second: str) -> Optional[ChatRoom]:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.find_direct(first, second)
		with _store_errors():
			async with pool.acquire() as conn:
				row = await conn.fetchrow(
					"""
					SELECT * FROM chat_rooms
					WHERE type = 'direct' AND $1 = ANY(members) AND $2 = ANY(members)
					LIMIT 1
					""",
					first,
					second,
				)
		return _row_to_room(row) if row else None


async def reset_memory_state() -> None:
	"""Test helper to clear in-memory rooms and messages."""
	async with _MEMORY._lock:  # type: ignore[attr-defined]
		_MEMORY.rooms.clear()
		_MEMORY.messages.clear()
