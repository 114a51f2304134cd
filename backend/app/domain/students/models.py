"""Domain models for student attribute snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Tuple


def tag_tuple(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
	"""Coerce a stored tag array into a tuple; missing arrays become empty."""
	if not values:
		return ()
	return tuple(str(value) for value in values)


@dataclass(frozen=True, slots=True)
class StudentAttributes:
	"""Read-only snapshot of the attributes the matcher scores on.

	Tags are kept exactly as the profile collaborator stored them. No case or
	whitespace folding happens here, so "Hiking" and "hiking " are distinct.
	"""

	id: str
	name: str
	major: str
	courses: Tuple[str, ...] = ()
	interests: Tuple[str, ...] = ()
	hobbies: Tuple[str, ...] = ()
	goals: Tuple[str, ...] = ()
	year: Optional[str] = None
	bio: Optional[str] = None
	created_at: Optional[datetime] = field(default=None, compare=False)

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"name": self.name,
			"major": self.major,
			"year": self.year,
			"bio": self.bio,
			"courses": list(self.courses),
			"interests": list(self.interests),
			"hobbies": list(self.hobbies),
			"goals": list(self.goals),
		}
