"""Domain models for match results and persisted match records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.students.models import StudentAttributes

RecordStatus = str

RECORD_STATUSES = ("pending", "accepted", "rejected")


@dataclass(frozen=True, slots=True)
class MatchResult:
	"""A scored candidate. Computed on demand, never stored by the matcher."""

	student: StudentAttributes
	score: int

	def to_dict(self) -> dict:
		return {"student": self.student.to_dict(), "score": self.score}


@dataclass(slots=True)
class MatchRecord:
	id: str
	student_id: str
	connected_id: str
	status: RecordStatus
	match_score: int
	created_at: datetime

	def involves(self, student_id: str) -> bool:
		return student_id in (self.student_id, self.connected_id)
