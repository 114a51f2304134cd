"""Pydantic schemas for the matching API."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.domain.students.schemas import StudentResponse

from .models import MatchRecord, MatchResult


class MatchCalculateRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	student_id: str = Field(..., alias="studentId", description="Student to compute matches for")


class MatchResponse(BaseModel):
	student: StudentResponse
	score: int = Field(..., ge=0, le=100)

	@classmethod
	def from_model(cls, result: MatchResult) -> "MatchResponse":
		return cls(student=StudentResponse.from_model(result.student), score=result.score)


class MatchRecordCreateRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	student_id: str = Field(..., alias="studentId", min_length=1)
	connected_id: str = Field(..., alias="connectedId", min_length=1)
	status: str = Field(default="pending", pattern="^(pending|accepted|rejected)$")
	match_score: int = Field(..., alias="matchScore", ge=0, le=100)


class MatchRecordResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: str
	student_id: str = Field(..., serialization_alias="studentId")
	connected_id: str = Field(..., serialization_alias="connectedId")
	status: str
	match_score: int = Field(..., serialization_alias="matchScore")
	created_at: datetime = Field(..., serialization_alias="createdAt")

	@classmethod
	def from_model(cls, record: MatchRecord) -> "MatchRecordResponse":
		return cls(
			id=record.id,
			student_id=record.student_id,
			connected_id=record.connected_id,
			status=record.status,
			match_score=record.match_score,
			created_at=record.created_at,
		)


class MatchRecordListResponse(BaseModel):
	items: List[MatchRecordResponse]
