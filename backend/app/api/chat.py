"""FastAPI endpoints for chat rooms and messages."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from app.api.errors import status_for
from app.domain.chat import ChatRoomService, ChatTransport
from app.domain.chat.exceptions import ChatError
from app.domain.chat.schemas import (
	ComposeMessageRequest,
	DirectRoomRequest,
	MessageListResponse,
	MessageResponse,
	RoomCreateRequest,
	RoomResponse,
)

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_transport(request: Request) -> ChatTransport:
	return request.app.state.chat_transport


def get_room_service(transport: ChatTransport = Depends(get_chat_transport)) -> ChatRoomService:
	return ChatRoomService(transport.repository)


def _as_http_error(exc: ChatError) -> HTTPException:
	return HTTPException(status_code=status_for(exc), detail=exc.reason)


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def compose_message_endpoint(
	payload: ComposeMessageRequest,
	transport: ChatTransport = Depends(get_chat_transport),
) -> MessageResponse:
	try:
		message = await transport.compose(payload, source="http")
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return MessageResponse.from_model(message)


@router.get("/rooms", response_model=List[RoomResponse])
async def list_rooms_endpoint(
	student_id: Optional[str] = Query(default=None, alias="studentId"),
	rooms: ChatRoomService = Depends(get_room_service),
) -> List[RoomResponse]:
	try:
		items = await rooms.list_rooms(student_id)
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return [RoomResponse.from_model(room) for room in items]


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room_endpoint(
	payload: RoomCreateRequest,
	rooms: ChatRoomService = Depends(get_room_service),
) -> RoomResponse:
	try:
		room = await rooms.create_room(payload)
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return RoomResponse.from_model(room)


@router.post("/rooms/direct", response_model=RoomResponse)
async def direct_room_endpoint(
	payload: DirectRoomRequest,
	rooms: ChatRoomService = Depends(get_room_service),
) -> RoomResponse:
	try:
		room = await rooms.get_or_create_direct(payload)
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return RoomResponse.from_model(room)


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room_endpoint(
	room_id: str,
	rooms: ChatRoomService = Depends(get_room_service),
) -> RoomResponse:
	try:
		room = await rooms.get_room(room_id)
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return RoomResponse.from_model(room)


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room_endpoint(
	room_id: str,
	rooms: ChatRoomService = Depends(get_room_service),
) -> Response:
	try:
		await rooms.delete_room(room_id)
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/rooms/{room_id}/messages", response_model=MessageListResponse)
async def list_messages_endpoint(
	room_id: str,
	*,
	after: Optional[datetime] = Query(default=None),
	limit: int = Query(default=50, ge=1, le=200),
	rooms: ChatRoomService = Depends(get_room_service),
) -> MessageListResponse:
	try:
		messages = await rooms.history(room_id, after=after, limit=limit)
	except ChatError as exc:
		raise _as_http_error(exc) from exc
	return MessageListResponse(items=[MessageResponse.from_model(message) for message in messages])
