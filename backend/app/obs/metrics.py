"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, Summary


REQUEST_COUNTER = Counter(
	"campus_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"campus_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SOCKET_CLIENTS = Gauge(
	"campus_socketio_clients",
	"Active Socket.IO clients per namespace",
	["namespace"],
)

SOCKET_EVENTS = Counter(
	"campus_socketio_events_total",
	"Socket.IO events handled",
	["namespace", "event"],
)

SOCKET_FRAME_ERRORS = Counter(
	"campus_socketio_frame_errors_total",
	"Error frames sent back to Socket.IO clients",
	["namespace", "reason"],
)

CHAT_SEND = Counter(
	"campus_chat_messages_sent_total",
	"Chat messages persisted",
	["source"],
)

CHAT_SEND_FAILURES = Counter(
	"campus_chat_send_failures_total",
	"Chat compose attempts rejected before broadcast",
	["reason"],
)

CHAT_BROADCAST_DELIVERIES = Counter(
	"campus_chat_broadcast_deliveries_total",
	"Message frames delivered to subscribed connections",
)

CHAT_ACTIVE_ROOMS = Gauge(
	"campus_chat_active_rooms",
	"Rooms with at least one subscribed connection",
)

MATCH_COMPUTATIONS = Counter(
	"campus_match_computations_total",
	"Match list computations",
	["result"],
)

MATCH_RESULTS = Summary(
	"campus_match_results",
	"Number of candidates returned per match computation",
)

POSTGRES_UP = Gauge("campus_postgres_up", "Postgres availability (1=up,0=down)")
POSTGRES_LATENCY = Summary("campus_postgres_latency_seconds", "Postgres ping latency (seconds)")


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def socket_connected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).inc()


def socket_disconnected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).dec()


def socket_event(namespace: str, event: str) -> None:
	SOCKET_EVENTS.labels(namespace=namespace, event=event).inc()


def socket_frame_error(namespace: str, reason: str) -> None:
	SOCKET_FRAME_ERRORS.labels(namespace=namespace, reason=reason).inc()


def inc_chat_send(source: str) -> None:
	CHAT_SEND.labels(source=source).inc()


def inc_chat_send_failure(reason: str) -> None:
	CHAT_SEND_FAILURES.labels(reason=reason).inc()


def inc_chat_delivered(count: int = 1) -> None:
	if count > 0:
		CHAT_BROADCAST_DELIVERIES.inc(count)


def set_chat_active_rooms(count: int) -> None:
	CHAT_ACTIVE_ROOMS.set(count)


def observe_match_computation(result: str, candidates: int = 0) -> None:
	MATCH_COMPUTATIONS.labels(result=result).inc()
	if result == "ok":
		MATCH_RESULTS.observe(candidates)


def mark_postgres(ok: bool, *, latency_seconds: float | None = None) -> None:
	POSTGRES_UP.set(1 if ok else 0)
	if latency_seconds is not None:
		POSTGRES_LATENCY.observe(latency_seconds)
