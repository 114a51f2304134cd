"""Domain models for rooms and chat messages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

RoomType = str

ROOM_TYPES = ("study", "event", "social", "direct")


@dataclass(slots=True)
class ChatRoom:
	"""Persisted room; ``last_message*`` is a cache kept by the store on every insert."""

	id: str
	name: str
	type: RoomType
	members: Tuple[str, ...]
	created_at: datetime
	related_id: Optional[str] = None
	last_message: Optional[str] = None
	last_message_time: Optional[datetime] = None

	def has_member(self, student_id: str) -> bool:
		return student_id in self.members

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"name": self.name,
			"type": self.type,
			"relatedId": self.related_id,
			"members": list(self.members),
			"lastMessage": self.last_message,
			"lastMessageTime": self.last_message_time.isoformat() if self.last_message_time else None,
			"createdAt": self.created_at.isoformat(),
		}


@dataclass(frozen=True, slots=True)
class Message:
	"""An immutable chat message scoped to exactly one room."""

	id: str
	room_id: str
	sender_id: str
	sender_name: str
	content: str
	created_at: datetime

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"roomId": self.room_id,
			"senderId": self.sender_id,
			"senderName": self.sender_name,
			"content": self.content,
			"createdAt": self.created_at.isoformat(),
		}
