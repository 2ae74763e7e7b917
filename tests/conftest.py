"""Shared pytest fixtures for ossclient tests.

Operation tests run against ``RecordingTransport``, which answers from a
queue of canned responses and keeps every request it was asked to send, so
tests can assert both on what went over the wire and on how the response
was decoded.
"""

import pytest

from ossclient.comm import RequestMessage, ResponseMessage
from ossclient.multipart import MultipartOperation
from ossclient.operation import ClientContext

ENDPOINT = "http://oss.test"


class RecordingTransport:
    """A fake transport that records requests and replays queued responses."""

    def __init__(self) -> None:
        self.requests: list[RequestMessage] = []
        self.bodies: list[bytes | None] = []
        self.responses: list[ResponseMessage] = []
        self.closed = False

    def queue(self, status_code: int = 200, headers=None, content: bytes = b"") -> None:
        self.responses.append(ResponseMessage(status_code, headers or {}, content))

    def send(self, request: RequestMessage) -> ResponseMessage:
        self.requests.append(request)
        if request.body is None:
            self.bodies.append(None)
        else:
            self.bodies.append(b"".join(request.body.stream.iter_chunks()))
        if not self.responses:
            raise AssertionError(f"No response queued for {request.method.value} {request.url}")
        return self.responses.pop(0)

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> RequestMessage:
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def context(transport) -> ClientContext:
    return ClientContext(endpoint=ENDPOINT, transport=transport, path_style=True)


@pytest.fixture
def operation(context) -> MultipartOperation:
    return MultipartOperation(context)
