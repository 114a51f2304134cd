"""Domain-level exceptions for compatibility matching."""

from __future__ import annotations


class MatchError(Exception):
	"""Base class for matching errors."""

	reason: str = "unknown"

	def __init__(self, reason: str | None = None) -> None:
		super().__init__(reason or self.reason)
		if reason:
			self.reason = reason


class MatchInputError(MatchError):
	reason = "invalid_input"


class StudentNotFound(MatchError):
	reason = "student_not_found"
