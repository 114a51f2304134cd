"""Domain-level exceptions for rooms, messages and live connections."""

from __future__ import annotations


class ChatError(Exception):
	"""Base class for chat errors; ``reason`` is the caller-visible code."""

	reason: str = "unknown"

	def __init__(self, reason: str | None = None) -> None:
		super().__init__(reason or self.reason)
		if reason:
			self.reason = reason


class ChatValidationError(ChatError):
	reason = "invalid_message"


class RoomNotFound(ChatError):
	reason = "room_not_found"


class ChatStoreError(ChatError):
	"""The message store could not complete a read or write."""

	reason = "store_unavailable"


class ConnectionClosed(ChatError):
	reason = "connection_closed"


class NotSubscribed(ChatError):
	reason = "join_required"


class MalformedFrame(ChatError):
	reason = "malformed_frame"
