"""Socket.IO namespace for room chat."""

from __future__ import annotations

import json
from typing import Any, Optional

import socketio

from app.obs import metrics as obs_metrics

from .exceptions import ChatError, MalformedFrame
from .service import ChatTransport, error_frame


def parse_frame(payload: Any) -> dict:
	"""Accept a dict or a JSON text frame; anything else is malformed."""
	if isinstance(payload, (str, bytes)):
		try:
			payload = json.loads(payload)
		except ValueError:
			raise MalformedFrame("invalid_json") from None
	if not isinstance(payload, dict):
		raise MalformedFrame("frame_not_object")
	return payload


def _required(frame: dict, key: str) -> str:
	value = frame.get(key)
	if not isinstance(value, str):
		raise MalformedFrame(f"{key}_required")
	return value


class ChatNamespace(socketio.AsyncNamespace):
	"""Streams room messages; one connection is subscribed to at most one room."""

	def __init__(self, transport: ChatTransport, namespace: str = "/chat") -> None:
		super().__init__(namespace)
		self.transport = transport
		transport.bind_sender(self.send_frame)

	async def send_frame(self, sid: str, event: str, frame: dict) -> None:
		await self.emit(event, frame, room=sid)

	async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None) -> None:
		obs_metrics.socket_connected(self.namespace)
		self.transport.connect(sid)

	async def on_disconnect(self, sid: str, reason: Optional[str] = None) -> None:
		obs_metrics.socket_disconnected(self.namespace)
		self.transport.close(sid)

	async def on_join(self, sid: str, payload: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, "join")
		try:
			await self._join(sid, parse_frame(payload))
		except ChatError as exc:
			await self._reject(sid, exc)

	async def on_message(self, sid: str, payload: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, "message")
		try:
			frame = parse_frame(payload)
			frame_type = frame.get("type", "message")
			if frame_type == "join":
				await self._join(sid, frame)
			elif frame_type == "message":
				await self.transport.compose_from(
					sid,
					sender_id=_required(frame, "senderId"),
					sender_name=_required(frame, "senderName"),
					content=_required(frame, "content"),
				)
			else:
				raise MalformedFrame("unknown_frame_type")
		except ChatError as exc:
			await self._reject(sid, exc)

	async def _join(self, sid: str, frame: dict) -> None:
		await self.transport.subscribe(sid, _required(frame, "roomId"))

	async def _reject(self, sid: str, exc: ChatError) -> None:
		obs_metrics.socket_frame_error(self.namespace, exc.reason)
		await self.send_frame(sid, "error", error_frame(exc.reason))
