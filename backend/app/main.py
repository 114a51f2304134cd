"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import asyncpg
import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import chat, matches, ops, students
from app.api.errors import install_error_handlers
from app.api.middleware_request_id import RequestIdMiddleware
from app.domain.chat import ChatTransport, ConnectionRegistry
from app.domain.chat.sockets import ChatNamespace
from app.infra import postgres
from app.obs import init as obs_init
from app.settings import settings

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	try:
		await postgres.init_pool()
	except (OSError, asyncpg.PostgresError) as exc:
		LOGGER.warning("postgres_unavailable", extra={"error": str(exc)})
	try:
		yield
	finally:
		await postgres.close_pool()


app = FastAPI(title="Campus Connect", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:3000", "http://localhost:5173"] if settings.is_dev() else []

# Starlette disallows wildcard '*' with allow_credentials=True.
allow_credentials = "*" not in allow_origins

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=allow_credentials,
	allow_methods=["*"],
	allow_headers=["*"],
)

# One registry per server process; sockets and the HTTP compose route share it.
chat_transport = ChatTransport(registry=ConnectionRegistry())
app.state.chat_transport = chat_transport

sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=allow_origins)
chat_namespace = ChatNamespace(chat_transport)
sio.register_namespace(chat_namespace)
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)
obs_init(app)

# Ensure every request carries an X-Request-Id and make it available on request.state
app.add_middleware(RequestIdMiddleware)

app.include_router(students.router, tags=["students"])
app.include_router(matches.router, tags=["matches"])
app.include_router(chat.router, tags=["chat"])
app.include_router(ops.router, tags=["ops"])
