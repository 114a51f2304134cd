"""Match computation and match-record service layer."""

from __future__ import annotations

import logging
from typing import List, Optional

from app.domain.students.repo import StudentRepository
from app.obs import metrics as obs_metrics
from app.settings import settings

from .exceptions import MatchInputError, StudentNotFound
from .models import MatchRecord, MatchResult
from .repo import MatchRecordRepository
from .schemas import MatchRecordCreateRequest
from .scoring import rank

LOGGER = logging.getLogger(__name__)


class MatchService:
	def __init__(
		self,
		students: Optional[StudentRepository] = None,
		records: Optional[MatchRecordRepository] = None,
	) -> None:
		self._students = students if students is not None else StudentRepository()
		self._records = records if records is not None else MatchRecordRepository()

	async def compute_matches(self, student_id: str) -> List[MatchResult]:
		"""Rank every stored student against ``student_id``.

		Raises ``MatchInputError`` for a blank id and ``StudentNotFound`` when
		there is no attribute-set to score from. Either way no partial list is
		produced.
		"""
		student_id = (student_id or "").strip()
		if not student_id:
			obs_metrics.observe_match_computation("invalid")
			raise MatchInputError("student_id_required")
		target = await self._students.get_by_id(student_id)
		if target is None:
			obs_metrics.observe_match_computation("not_found")
			raise StudentNotFound()
		pool = await self._students.list_all()
		results = rank(target, pool)
		if settings.match_result_limit > 0:
			results = results[: settings.match_result_limit]
		obs_metrics.observe_match_computation("ok", len(results))
		LOGGER.info(
			"match_computed",
			extra={"student_id": student_id, "candidates": len(pool), "matches": len(results)},
		)
		return results

	async def create_record(self, payload: MatchRecordCreateRequest) -> MatchRecord:
		if payload.student_id == payload.connected_id:
			raise MatchInputError("cannot_match_self")
		for student_id in (payload.student_id, payload.connected_id):
			if await self._students.get_by_id(student_id) is None:
				raise StudentNotFound()
		return await self._records.create(
			student_id=payload.student_id,
			connected_id=payload.connected_id,
			status=payload.status,
			match_score=payload.match_score,
		)

	async def list_records(self, student_id: str) -> List[MatchRecord]:
		return await self._records.list_for(student_id)
