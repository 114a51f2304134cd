"""Pydantic schemas for the chat API and stream frames."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import ChatRoom, Message


class ComposeMessageRequest(BaseModel):
	"""Shared payload of both compose entry points (HTTP and stream)."""

	model_config = ConfigDict(populate_by_name=True)

	room_id: str = Field(..., alias="roomId")
	sender_id: str = Field(..., alias="senderId")
	sender_name: str = Field(..., alias="senderName")
	content: str


class MessageResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: str
	room_id: str = Field(..., serialization_alias="roomId")
	sender_id: str = Field(..., serialization_alias="senderId")
	sender_name: str = Field(..., serialization_alias="senderName")
	content: str
	created_at: datetime = Field(..., serialization_alias="createdAt")

	@classmethod
	def from_model(cls, message: Message) -> "MessageResponse":
		return cls(
			id=message.id,
			room_id=message.room_id,
			sender_id=message.sender_id,
			sender_name=message.sender_name,
			content=message.content,
			created_at=message.created_at,
		)


class MessageListResponse(BaseModel):
	items: List[MessageResponse]


class RoomCreateRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	name: str = Field(..., min_length=1, max_length=120)
	type: str = Field(..., pattern="^(study|event|social|direct)$")
	related_id: Optional[str] = Field(default=None, alias="relatedId")
	members: List[str] = Field(default_factory=list)


class DirectRoomRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	student1_id: str = Field(..., alias="student1Id", min_length=1)
	student2_id: str = Field(..., alias="student2Id", min_length=1)
	student1_name: str = Field(..., alias="student1Name", min_length=1)
	student2_name: str = Field(..., alias="student2Name", min_length=1)


class RoomResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: str
	name: str
	type: str
	related_id: Optional[str] = Field(default=None, serialization_alias="relatedId")
	members: List[str]
	last_message: Optional[str] = Field(default=None, serialization_alias="lastMessage")
	last_message_time: Optional[datetime] = Field(default=None, serialization_alias="lastMessageTime")
	created_at: datetime = Field(..., serialization_alias="createdAt")

	@classmethod
	def from_model(cls, room: ChatRoom) -> "RoomResponse":
		return cls(
			id=room.id,
			name=room.name,
			type=room.type,
			related_id=room.related_id,
			members=list(room.members),
			last_message=room.last_message,
			last_message_time=room.last_message_time,
			created_at=room.created_at,
		)
