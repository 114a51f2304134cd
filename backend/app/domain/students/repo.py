"""Student attribute repository backed by asyncpg with an in-memory fallback."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

import asyncpg
import ulid

from app.infra.postgres import pool_or_none

from .models import StudentAttributes, tag_tuple
from .schemas import StudentUpsertRequest


class _InMemoryStore:
	"""Fallback store used in tests when Postgres is unavailable."""

	def __init__(self) -> None:
		self._lock = asyncio.Lock()
		self.students: Dict[str, StudentAttributes] = {}

	async def upsert(self, student: StudentAttributes) -> StudentAttributes:
		async with self._lock:
			self.students[student.id] = student
			return student

	async def get(self, student_id: str) -> Optional[StudentAttributes]:
		async with self._lock:
			return self.students.get(student_id)

	async def list_all(self) -> List[StudentAttributes]:
		async with self._lock:
			return list(self.students.values())


_MEMORY = _InMemoryStore()


def _row_to_student(row: asyncpg.Record) -> StudentAttributes:
	return StudentAttributes(
		id=str(row["id"]),
		name=row["name"],
		major=row["major"],
		year=row["year"],
		bio=row["bio"],
		courses=tag_tuple(row["courses"]),
		interests=tag_tuple(row["interests"]),
		hobbies=tag_tuple(row["hobbies"]),
		goals=tag_tuple(row["goals"]),
		created_at=row["created_at"],
	)


class StudentRepository:
	def __init__(self) -> None:
		self._pool_checked = False
		self._pool: Optional[asyncpg.Pool] = None

	async def _pool_or_none(self) -> Optional[asyncpg.Pool]:
		if self._pool_checked:
			return self._pool
		self._pool_checked = True
		self._pool = await pool_or_none()
		return self._pool

	async def get_by_id(self, student_id: str) -> Optional[StudentAttributes]:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.get(student_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow("SELECT * FROM students WHERE id = $1", student_id)
		return _row_to_student(row) if row else None

	async def list_all(self) -> List[StudentAttributes]:
		pool = await self._pool_or_none()
		if pool is None:
			return await _MEMORY.list_all()
		async with pool.acquire() as conn:
			rows = await conn.fetch("SELECT * FROM students ORDER BY created_at ASC, id ASC")
		return [_row_to_student(row) for row in rows]

	async def upsert(self, payload: StudentUpsertRequest) -> StudentAttributes:
		student_id = payload.id or str(ulid.new())
		pool = await self._pool_or_none()
		if pool is None:
			existing = await _MEMORY.get(student_id)
			student = StudentAttributes(
				id=student_id,
				name=payload.name,
				major=payload.major,
				year=payload.year,
				bio=payload.bio,
				courses=tag_tuple(payload.courses),
				interests=tag_tuple(payload.interests),
				hobbies=tag_tuple(payload.hobbies),
				goals=tag_tuple(payload.goals),
				created_at=existing.created_at if existing else datetime.now(timezone.utc),
			)
			return await _MEMORY.upsert(student)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				"""
				INSERT INTO students (id, name, major, year, bio, courses, interests, hobbies, goals)
				VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
				ON CONFLICT (id) DO UPDATE SET
					name = EXCLUDED.name,
					major = EXCLUDED.major,
					year = EXCLUDED.year,
					bio = EXCLUDED.bio,
					courses = EXCLUDED.courses,
					interests = EXCLUDED.interests,
					hobbies = EXCLUDED.hobbies,
					goals = EXCLUDED.goals
				RETURNING *
				""",
				student_id,
				payload.name,
				payload.major,
				payload.year,
				payload.bio,
				list(payload.courses),
				list(payload.interests),
				list(payload.hobbies),
				list(payload.goals),
			)
		return _row_to_student(row)


async def reset_memory_state() -> None:
	"""Test helper to clear in-memory student state."""
	async with _MEMORY._lock:  # type: ignore[attr-defined]
		_MEMORY.students.clear()
