"""Persistence for match records (connection requests users act on)."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

import asyncpg
import ulid

from app.infra.postgres import pool_or_none

from .models import MatchRecord


class _InMemoryStore:
	def __init__(self) -> None:
		self._lock = asyncio.Lock()
		self.records: Dict[str, MatchRecord] = {}

	async def insert(self, record: MatchRecord) -> MatchRecord:
		async with self._lock:
			self.records[record.id] = record
			return record

	async def list_for(self, student_id: str) -> List[MatchRecord]:
		async with self._lock:
			found = [record for record in self.records.values() if record.involves(student_id)]
		found.sort(key=lambda record: (record.created_at, record.id), reverse=True)
		return found


_MEMORY = _InMemoryStore()


def _row_to_record(row: asyncpg.Record) -> MatchRecord:
	return MatchRecord(
		id=str(row["id"]),
		student_id=str(row["student_id"]),
		connected_id=str(row["connected_id"]),
		status=row["status"],
		match_score=int(row["match_score"]),
		created_at=row["created_at"],
	)


class MatchRecordRepository:
	def __init__(self) -> None:
		self._pool_checked = False
		self._pool: Optional[asyncpg.Pool] = None

	async def _pool_or_none(self) -> Optional[asyncpg.Pool]:
		if self._pool_checked:
			return self._pool
		self._pool_checked = True
		self._pool = await pool_or_none()
		return self._pool

	async def create(
		self,
		*,
		student_id: str,
		connected_id: str,
		status: str,
		match_score: int,
	) -> MatchRecord:
		record_id = str(ulid.new())
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.insert(
				MatchRecord(
					id=record_id,
					student_id=student_id,
					connected_id=connected_id,
					status=status,
					match_score=match_score,
					created_at=datetime.now(timezone.utc),
				)
			)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				"""
				INSERT INTO connections (id, student_id, connected_id, status, match_score)
				VALUES ($1, $2, $3, $4, $5)
				RETURNING *
				""",
				record_id,
				student_id,
				connected_id,
				status,
				match_score,
			)
		return _row_to_record(row)

	async def list_for(self, student_id: str) -> List[MatchRecord]:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.list_for(student_id)
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT * FROM connections
				WHERE student_id = $1 OR connected_id = $1
				ORDER BY created_at DESC, id DESC
				""",
				student_id,
			)
		return [_row_to_record(row) for row in rows]


async def reset_memory_state() -> None:
	"""Test helper to clear in-memory match records."""
	async with _MEMORY._lock:  # type: ignore[attr-defined]
		_MEMORY.records.clear()
