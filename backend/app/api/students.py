"""FastAPI endpoints for seeding and reading student attribute-sets."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, status

from app.domain.students import StudentRepository
from app.domain.students.schemas import StudentResponse, StudentUpsertRequest

router = APIRouter(prefix="/students", tags=["students"])

_repository = StudentRepository()


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def upsert_student_endpoint(payload: StudentUpsertRequest) -> StudentResponse:
	student = await _repository.upsert(payload)
	return StudentResponse.from_model(student)


@router.get("", response_model=List[StudentResponse])
async def list_students_endpoint() -> List[StudentResponse]:
	students = await _repository.list_all()
	return [StudentResponse.from_model(student) for student in students]


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student_endpoint(student_id: str) -> StudentResponse:
	student = await _repository.get_by_id(student_id)
	if student is None:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="student_not_found")
	return StudentResponse.from_model(student)
