"""Tests for the httpx-backed transport."""

import io

import httpx
import pytest

from ossclient.comm import HttpMethod, RequestBody, assemble_request
from ossclient.errors import ClientError
from ossclient.transport import DEFAULT_USER_AGENT, HttpxTransport


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestHttpxTransport:
    """Tests for HttpxTransport.send()."""

    def test_sends_ordered_query_and_headers(self):
        """The wire URL keeps parameter order and the descriptor headers."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["md5"] = request.headers.get("Content-MD5")
            seen["ua"] = request.headers.get("User-Agent")
            return httpx.Response(200, headers={"x-oss-request-id": "R1"}, content=b"<ok/>")

        req = assemble_request(
            "http://oss.test",
            HttpMethod.GET,
            "bucket",
            parameters={"uploads": None, "delimiter": "/"},
            headers={"Content-MD5": "abc"},
            path_style=True,
        )
        resp = _transport(handler).send(req)

        assert seen["url"] == "http://oss.test/bucket?uploads&delimiter=%2F"
        assert seen["method"] == "GET"
        assert seen["md5"] == "abc"
        assert seen["ua"] == DEFAULT_USER_AGENT
        assert resp.status_code == 200
        assert resp.content == b"<ok/>"
        assert resp.request_id == "R1"

    def test_sized_body(self):
        """A sized body is sent with its declared length."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.read()
            seen["length"] = request.headers.get("Content-Length")
            return httpx.Response(200, headers={"ETag": '"e"'})

        req = assemble_request(
            "http://oss.test",
            HttpMethod.PUT,
            "bucket",
            "key",
            parameters={"partNumber": "1", "uploadId": "u"},
            headers={"Content-Length": "3"},
            body=RequestBody.of_stream(io.BytesIO(b"abcdef"), 3),
            path_style=True,
        )
        _transport(handler).send(req)
        assert seen["body"] == b"abc"
        assert seen["length"] == "3"

    def test_empty_body(self):
        """An empty body is sent with Content-Length 0."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["length"] = request.headers.get("Content-Length")
            return httpx.Response(200)

        req = assemble_request(
            "http://oss.test", HttpMethod.POST, "bucket", "key", body=RequestBody.empty()
        )
        _transport(handler).send(req)
        assert seen["length"] == "0"

    def test_no_body_drops_copy_length(self):
        """A Content-Length describing a copied range is not put on the wire."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["length"] = request.headers.get("Content-Length")
            seen["body"] = request.read()
            return httpx.Response(200)

        req = assemble_request(
            "http://oss.test",
            HttpMethod.PUT,
            "bucket",
            "key",
            headers={"Content-Length": "1024", "x-oss-copy-source": "/a/b"},
        )
        _transport(handler).send(req)
        assert seen["length"] in (None, "0")
        assert seen["body"] == b""

    def test_connect_error_is_client_error(self):
        """httpx transport errors surface as ClientError with the cause."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        req = assemble_request("http://oss.test", HttpMethod.GET, "bucket")
        with pytest.raises(ClientError) as exc_info:
            _transport(handler).send(req)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_close_leaves_shared_client_open(self):
        """A transport given a client does not close it."""
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        HttpxTransport(client=client).close()
        assert not client.is_closed
        client.close()

    def test_close_owned_client(self):
        """A transport that created its client closes it."""
        transport = HttpxTransport(timeout=1.0)
        transport.close()
        assert transport._client.is_closed
