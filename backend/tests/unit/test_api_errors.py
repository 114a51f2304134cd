import pytest

from app.api.errors import status_for
from app.domain.chat.exceptions import ChatStoreError, ChatValidationError, NotSubscribed, RoomNotFound
from app.domain.matching.exceptions import MatchInputError, StudentNotFound


@pytest.mark.parametrize(
	"exc, expected",
	[
		(RoomNotFound(), 404),
		(StudentNotFound(), 404),
		(ChatStoreError(), 503),
		(ChatValidationError("content_required"), 400),
		(MatchInputError("student_id_required"), 400),
		(NotSubscribed(), 400),
	],
)
def test_domain_errors_map_to_http_status(exc, expected):
	assert status_for(exc) == expected
