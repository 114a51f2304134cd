"""Chat domain exports."""

from .registry import ConnectionRegistry, ConnectionState
from .repo import ChatRepository, reset_memory_state
from .room_service import ChatRoomService
from .service import ChatTransport

__all__ = [
	"ChatRepository",
	"ChatRoomService",
	"ChatTransport",
	"ConnectionRegistry",
	"ConnectionState",
	"reset_memory_state",
]
