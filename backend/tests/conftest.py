import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from app.domain.chat import reset_memory_state as reset_chat_state
from app.domain.matching.repo import reset_memory_state as reset_match_state
from app.domain.students import reset_memory_state as reset_student_state
from app.infra import postgres
from app.main import app
from app.settings import settings


# Ensure a selector-based event loop policy on Windows to avoid Proactor issues with async IO
if hasattr(asyncio, "WindowsSelectorEventLoopPolicy"):
	asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest_asyncio.fixture(autouse=True)
async def reset_stores():
	await reset_student_state()
	await reset_match_state()
	await reset_chat_state()
	yield
	await reset_student_state()
	await reset_match_state()
	await reset_chat_state()


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Pin the settings the chat and matcher read at call time."""
	original_env = settings.environment
	original_body_max = settings.chat_body_max_length
	original_limit = settings.match_result_limit
	settings.environment = "dev"
	settings.chat_body_max_length = 4000
	settings.match_result_limit = 0
	try:
		yield
	finally:
		settings.environment = original_env
		settings.chat_body_max_length = original_body_max
		settings.match_result_limit = original_limit


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
