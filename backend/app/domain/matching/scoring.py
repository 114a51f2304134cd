"""Weighted attribute-overlap scoring between two students.

Each category contributes ``overlap * weight`` capped per category. The caps
sum to exactly 100, and the result is always normalised against that fixed
maximum rather than against what a sparse profile could reach, so a student
who filled in only their courses is not inflated.

Tags compare with exact, case-sensitive equality. Profiles entered with
inconsistent casing or stray whitespace under-count; that is a known
limitation and deliberately not corrected here.
"""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Sequence

from app.domain.students.models import StudentAttributes

from .models import MatchResult


class CategoryWeight(NamedTuple):
	attribute: str
	per_match: int
	cap: int


CATEGORY_WEIGHTS: tuple[CategoryWeight, ...] = (
	CategoryWeight("courses", 10, 30),
	CategoryWeight("interests", 5, 25),
	CategoryWeight("hobbies", 5, 20),
	CategoryWeight("goals", 5, 15),
)
MAJOR_WEIGHT = 10
MAX_SCORE = sum(weight.cap for weight in CATEGORY_WEIGHTS) + MAJOR_WEIGHT
MATCH_THRESHOLD = 60


def _overlap(left: Iterable[str], right: Iterable[str]) -> int:
	return len(set(left) & set(right))


def raw_score(a: StudentAttributes, b: StudentAttributes) -> int:
	total = 0
	for weight in CATEGORY_WEIGHTS:
		shared = _overlap(getattr(a, weight.attribute), getattr(b, weight.attribute))
		total += min(shared * weight.per_match, weight.cap)
	if a.major == b.major:
		total += MAJOR_WEIGHT
	return total


def score(a: StudentAttributes, b: StudentAttributes) -> int:
	"""Return the compatibility score of ``a`` and ``b`` in [0, 100]."""
	return int(round(raw_score(a, b) / MAX_SCORE * 100))


def rank(
	target: StudentAttributes,
	pool: Sequence[StudentAttributes],
	*,
	threshold: int = MATCH_THRESHOLD,
) -> List[MatchResult]:
	"""Score ``pool`` against ``target`` and return the meaningful matches.

	The target is dropped from its own pool by id. Results are ordered by
	score descending, then candidate id ascending so equal scores come back
	in the same order regardless of how the pool was fetched.
	"""
	results = [
		MatchResult(student=candidate, score=score(target, candidate))
		for candidate in pool
		if candidate.id != target.id
	]
	kept = [result for result in results if result.score >= threshold]
	kept.sort(key=lambda result: (-result.score, result.student.id))
	return kept
