import pytest

from app.domain.matching import MatchService
from app.domain.matching.exceptions import MatchInputError, StudentNotFound
from app.domain.matching.repo import MatchRecordRepository
from app.domain.matching.schemas import MatchRecordCreateRequest
from app.domain.students import StudentRepository
from app.domain.students.schemas import StudentUpsertRequest
from app.settings import settings

COURSES = ["CS101", "CS201", "CS301"]
INTERESTS = ["AI", "Music", "Film", "Chess", "Writing"]


async def _seed(repo: StudentRepository, student_id: str, **overrides) -> None:
	payload = {
		"id": student_id,
		"name": f"Student {student_id}",
		"major": "CS",
		"courses": COURSES,
		"interests": INTERESTS,
	}
	payload.update(overrides)
	await repo.upsert(StudentUpsertRequest(**payload))


@pytest.mark.asyncio
async def test_compute_matches_ranks_store_contents():
	students = StudentRepository()
	await _seed(students, "target")
	await _seed(students, "close", hobbies=["Chess"])
	await _seed(students, "far", major="Art", courses=[], interests=["AI"])
	service = MatchService(students=students)

	results = await service.compute_matches("target")

	assert [result.student.id for result in results] == ["close"]
	assert results[0].score == 65


@pytest.mark.asyncio
async def test_compute_matches_rejects_blank_id():
	service = MatchService()

	with pytest.raises(MatchInputError) as excinfo:
		await service.compute_matches("   ")
	assert excinfo.value.reason == "student_id_required"


@pytest.mark.asyncio
async def test_compute_matches_unknown_student():
	service = MatchService()

	with pytest.raises(StudentNotFound):
		await service.compute_matches("ghost")


@pytest.mark.asyncio
async def test_compute_matches_honours_result_limit():
	students = StudentRepository()
	await _seed(students, "target")
	for suffix in ("b", "c", "d"):
		await _seed(students, f"peer-{suffix}")
	settings.match_result_limit = 2

	results = await MatchService(students=students).compute_matches("target")

	assert [result.student.id for result in results] == ["peer-b", "peer-c"]


@pytest.mark.asyncio
async def test_match_records_are_listed_for_both_sides():
	students = StudentRepository()
	await _seed(students, "alice")
	await _seed(students, "bob")
	await _seed(students, "carol")
	service = MatchService(students=students)

	first = await service.create_record(
		MatchRecordCreateRequest(studentId="alice", connectedId="bob", matchScore=65)
	)
	second = await service.create_record(
		MatchRecordCreateRequest(studentId="carol", connectedId="alice", matchScore=70, status="accepted")
	)

	alice_records = await service.list_records("alice")
	assert {record.id for record in alice_records} == {first.id, second.id}
	assert [record.id for record in await service.list_records("bob")] == [first.id]
	assert first.status == "pending"


@pytest.mark.asyncio
async def test_match_record_requires_distinct_known_students():
	students = StudentRepository()
	await _seed(students, "alice")
	service = MatchService(students=students)

	with pytest.raises(MatchInputError):
		await service.create_record(MatchRecordCreateRequest(studentId="alice", connectedId="alice", matchScore=10))
	with pytest.raises(StudentNotFound):
		await service.create_record(MatchRecordCreateRequest(studentId="alice", connectedId="nobody", matchScore=10))


def test_injected_repositories_are_kept():
	students = StudentRepository()
	records = MatchRecordRepository()

	service = MatchService(students=students, records=records)

	assert service._students is students
	assert service._records is records
