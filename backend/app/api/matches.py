"""FastAPI endpoints for compatibility matching and match records."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, status

from app.api.errors import status_for
from app.domain.matching import MatchService
from app.domain.matching.exceptions import MatchError
from app.domain.matching.schemas import (
	MatchCalculateRequest,
	MatchRecordCreateRequest,
	MatchRecordListResponse,
	MatchRecordResponse,
	MatchResponse,
)

router = APIRouter(prefix="/matches", tags=["matches"])

_service = MatchService()


def _as_http_error(exc: MatchError) -> HTTPException:
	return HTTPException(status_code=status_for(exc), detail=exc.reason)


@router.post("/calculate", response_model=List[MatchResponse])
async def calculate_matches_endpoint(payload: MatchCalculateRequest) -> List[MatchResponse]:
	try:
		results = await _service.compute_matches(payload.student_id)
	except MatchError as exc:
		raise _as_http_error(exc) from exc
	return [MatchResponse.from_model(result) for result in results]


@router.post(
	"",
	response_model=MatchRecordResponse,
	response_model_by_alias=True,
	status_code=status.HTTP_201_CREATED,
)
async def create_match_record_endpoint(payload: MatchRecordCreateRequest) -> MatchRecordResponse:
	try:
		record = await _service.create_record(payload)
	except MatchError as exc:
		raise _as_http_error(exc) from exc
	return MatchRecordResponse.from_model(record)


@router.get("/{student_id}", response_model=MatchRecordListResponse, response_model_by_alias=True)
async def list_match_records_endpoint(student_id: str) -> MatchRecordListResponse:
	records = await _service.list_records(student_id)
	return MatchRecordListResponse(items=[MatchRecordResponse.from_model(record) for record in records])
