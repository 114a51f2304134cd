import json
import logging

from app.obs import logging as obs_logging


def _record(**extra) -> logging.LogRecord:
	record = logging.LogRecord("campus.test", logging.INFO, __file__, 1, "chat_message_broadcast", None, None)
	for key, value in extra.items():
		setattr(record, key, value)
	return record


def test_formatter_emits_context_and_redacts_bodies():
	tokens = obs_logging.bind_context(request_id="req-1", route="/chat/messages")
	try:
		line = obs_logging.JSONLogFormatter().format(_record(room_id="r1", content="secret text", subscribers=2))
	finally:
		obs_logging.reset_context(tokens)

	payload = json.loads(line)
	assert payload["msg"] == "chat_message_broadcast"
	assert payload["request_id"] == "req-1"
	assert payload["route"] == "/chat/messages"
	assert payload["room_id"] == "r1"
	assert payload["subscribers"] == 2
	assert payload["content"] == "[redacted]"


def test_context_resets_after_request():
	tokens = obs_logging.bind_context(request_id="req-2")
	obs_logging.reset_context(tokens)

	assert obs_logging.current_request_id() is None
