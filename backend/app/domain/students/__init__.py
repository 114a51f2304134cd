"""Student attribute store exports."""

from .models import StudentAttributes
from .repo import StudentRepository, reset_memory_state

__all__ = ["StudentAttributes", "StudentRepository", "reset_memory_state"]
