"""Pydantic schemas for student attribute payloads."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .models import StudentAttributes


class StudentUpsertRequest(BaseModel):
	id: Optional[str] = Field(default=None, description="Existing student id; generated when omitted")
	name: str = Field(..., min_length=1, max_length=120)
	major: str = Field(..., min_length=1, max_length=120)
	year: Optional[str] = None
	bio: Optional[str] = None
	courses: List[str] = Field(default_factory=list)
	interests: List[str] = Field(default_factory=list)
	hobbies: List[str] = Field(default_factory=list)
	goals: List[str] = Field(default_factory=list)


class StudentResponse(BaseModel):
	id: str
	name: str
	major: str
	year: Optional[str] = None
	bio: Optional[str] = None
	courses: List[str]
	interests: List[str]
	hobbies: List[str]
	goals: List[str]

	@classmethod
	def from_model(cls, student: StudentAttributes) -> "StudentResponse":
		return cls(**student.to_dict())
