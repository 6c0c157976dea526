import pytest
import requests

from crpt_client.providers.http import HttpSender, TransportError
from crpt_client.providers.models import DocumentRequest


class _Session:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return "response"

    def close(self) -> None:
        self.closed = True


def _request() -> DocumentRequest:
    return DocumentRequest(url="https://example.test/create", body=b"{}", headers={"Authorization": "Bearer t"})


def test_sender_posts_body_with_timeouts() -> None:
    session = _Session()
    sender = HttpSender(timeout_seconds=30.0, connect_timeout_seconds=10.0, session=session)
    assert sender.send(_request()) == "response"
    call = session.calls[0]
    assert call["url"] == "https://example.test/create"
    assert call["data"] == b"{}"
    assert call["headers"] == {"Authorization": "Bearer t"}
    assert call["timeout"] == (10.0, 30.0)


def test_sender_wraps_request_exceptions() -> None:
    sender = HttpSender(session=_Session(error=requests.Timeout("read timed out")))
    with pytest.raises(TransportError) as exc:
        sender.send(_request())
    assert "read timed out" in str(exc.value)
    assert exc.value.url == "https://example.test/create"


def test_sender_close_closes_session() -> None:
    session = _Session()
    HttpSender(session=session).close()
    assert session.closed is True
