"""Process-local registry of live stream connections and their room subscriptions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Set

from .exceptions import ConnectionClosed


class ConnectionState(str, enum.Enum):
	UNSUBSCRIBED = "unsubscribed"
	SUBSCRIBED = "subscribed"
	CLOSED = "closed"


@dataclass(slots=True)
class Connection:
	"""One live client; ``room_id`` is only set while subscribed."""

	sid: str
	room_id: Optional[str] = None
	closed: bool = False

	@property
	def state(self) -> ConnectionState:
		if self.closed:
			return ConnectionState.CLOSED
		if self.room_id is None:
			return ConnectionState.UNSUBSCRIBED
		return ConnectionState.SUBSCRIBED


class ConnectionRegistry:
	"""Maps room ids to the connections currently subscribed to them.

	A connection belongs to at most one room. Rooms with no subscribers are
	dropped from the map, so ``rooms()`` only ever reports live rooms.
	"""

	def __init__(self) -> None:
		self._connections: Dict[str, Connection] = {}
		self._rooms: Dict[str, Set[str]] = {}

	def __len__(self) -> int:
		return len(self._connections)

	def connect(self, sid: str) -> Connection:
		existing = self._connections.get(sid)
		if existing is not None:
			return existing
		connection = Connection(sid=sid)
		self._connections[sid] = connection
		return connection

	def get(self, sid: str) -> Optional[Connection]:
		return self._connections.get(sid)

	def subscribe(self, sid: str, room_id: str) -> Optional[str]:
		"""Move ``sid`` into ``room_id``; returns the room it left, if any."""
		connection = self._connections.get(sid)
		if connection is None or connection.closed:
			raise ConnectionClosed()
		previous = connection.room_id
		if previous == room_id:
			return None
		if previous is not None:
			self._discard(previous, sid)
		self._rooms.setdefault(room_id, set()).add(sid)
		connection.room_id = room_id
		return previous

	def unsubscribe(self, sid: str) -> Optional[str]:
		connection = self._connections.get(sid)
		if connection is None or connection.room_id is None:
			return None
		previous = connection.room_id
		self._discard(previous, sid)
		connection.room_id = None
		return previous

	def close(self, sid: str) -> Optional[Connection]:
		"""Forget ``sid`` entirely. Safe to call more than once."""
		connection = self._connections.pop(sid, None)
		if connection is None:
			return None
		if connection.room_id is not None:
			self._discard(connection.room_id, sid)
			connection.room_id = None
		connection.closed = True
		return connection

	def room_of(self, sid: str) -> Optional[str]:
		connection = self._connections.get(sid)
		return connection.room_id if connection else None

	def subscribers(self, room_id: str) -> FrozenSet[str]:
		# snapshot; callers may await between reads
		return frozenset(self._rooms.get(room_id, ()))

	def rooms(self) -> FrozenSet[str]:
		return frozenset(self._rooms)

	def _discard(self, room_id: str, sid: str) -> None:
		members = self._rooms.get(room_id)
		if members is None:
			return
		members.discard(sid)
		if not members:
			del self._rooms[room_id]
