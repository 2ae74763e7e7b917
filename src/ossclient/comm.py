"""Outbound request descriptors, raw responses and the request assembler.

``assemble_request`` turns the pieces produced by the builders into an
immutable ``RequestMessage``. The transport collaborator (see
``ossclient.transport``) only ever sees these descriptors and answers with a
``ResponseMessage``.
"""

from __future__ import annotations

import dataclasses
import enum
import io
import logging
import urllib.parse
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import BinaryIO, Protocol

import httpx

from ossclient import headers as h
from ossclient.errors import ClientError
from ossclient.streams import RepeatableStream, new_repeatable_stream
from ossclient.utils import uri_encode, uri_encode_path

logger = logging.getLogger(__name__)


class HttpMethod(str, enum.Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RequestBody:
    """A request payload.

    Attributes:
        stream: The body bytes. Wrapped into a ``RepeatableStream`` by
            ``assemble_request``.
        length: Number of bytes to send, or None for chunked transfer
            encoding.
        limit: For a chunked body, the most bytes read from ``stream``;
            None reads to EOF.
    """

    stream: BinaryIO | RepeatableStream
    length: int | None
    limit: int | None = None

    @property
    def chunked(self) -> bool:
        return self.length is None

    @classmethod
    def empty(cls) -> RequestBody:
        """A zero-length body. Distinct from sending no body at all."""
        return cls(io.BytesIO(b""), 0)

    @classmethod
    def of_bytes(cls, data: bytes) -> RequestBody:
        return cls(io.BytesIO(data), len(data))

    @classmethod
    def of_stream(cls, stream: BinaryIO, length: int) -> RequestBody:
        return cls(stream, length)

    @classmethod
    def of_chunked_stream(cls, stream: BinaryIO, limit: int | None = None) -> RequestBody:
        return cls(stream, None, limit)


@dataclass(frozen=True)
class RequestMessage:
    """Immutable description of one outbound request.

    Attributes:
        endpoint: Service endpoint URL, e.g. ``https://oss.example.com``.
        method: HTTP method.
        bucket: Target bucket, or None for service-level requests.
        key: Target object key, or None for bucket-level requests.
        parameters: Query parameters in emission order. A value of None
            renders a bare name (``?uploads``).
        headers: Read-only request headers.
        body: Request payload, or None when the request has no body.
        path_style: Address the bucket in the path instead of the host name.
    """

    endpoint: str
    method: HttpMethod
    bucket: str | None = None
    key: str | None = None
    parameters: tuple[tuple[str, str | None], ...] = ()
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: RequestBody | None = None
    path_style: bool = False

    @property
    def use_chunked_encoding(self) -> bool:
        return self.body is not None and self.body.chunked

    @property
    def query_string(self) -> str:
        """Render the parameters in order, without the leading '?'."""
        pairs = []
        for name, value in self.parameters:
            if value is None:
                pairs.append(uri_encode(name))
            else:
                pairs.append(f"{uri_encode(name)}={uri_encode(value)}")
        return "&".join(pairs)

    @property
    def url(self) -> str:
        """The full request URL including the ordered query string."""
        parsed = urllib.parse.urlsplit(self.endpoint)
        scheme = parsed.scheme or "https"
        host = parsed.netloc or parsed.path.rstrip("/")
        path = ""
        if self.bucket:
            if self.path_style:
                path = f"/{self.bucket}"
            else:
                host = f"{self.bucket}.{host}"
        if self.key:
            path += "/" + self.key
        url = f"{scheme}://{host}{uri_encode_path(path)}"
        query = self.query_string
        if query:
            url += "?" + query
        return url

    def with_headers(self, extra: Mapping[str, str]) -> RequestMessage:
        """Return a copy with ``extra`` merged over the current headers."""
        merged = dict(self.headers)
        merged.update(extra)
        return dataclasses.replace(self, headers=MappingProxyType(merged))


class ResponseMessage:
    """A raw service response.

    Attributes:
        status_code: HTTP status code.
        headers: Case-insensitive response headers.
        content: Response body bytes.
    """

    def __init__(
        self,
        status_code: int,
        headers: Mapping[str, str] | None = None,
        content: bytes = b"",
    ) -> None:
        self.status_code = status_code
        self.headers = httpx.Headers(headers or {})
        self.content = content

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def request_id(self) -> str:
        return self.headers.get(h.OSS_REQUEST_ID) or self.headers.get(h.REQUEST_ID_FALLBACK, "")

    def __repr__(self) -> str:
        return f"<ResponseMessage status={self.status_code} bytes={len(self.content)}>"


class Transport(Protocol):
    """Sends a request descriptor and returns the raw response.

    Implementations own connection handling and timeouts. They report
    failures to reach the service as ``ClientError``.
    """

    def send(self, request: RequestMessage) -> ResponseMessage:
        ...

    def close(self) -> None:
        ...


def assemble_request(
    endpoint: str,
    method: HttpMethod,
    bucket: str | None,
    key: str | None = None,
    parameters: Mapping[str, str | None] | None = None,
    headers: Mapping[str, str] | None = None,
    body: RequestBody | None = None,
    path_style: bool = False,
) -> RequestMessage:
    """Build an immutable RequestMessage.

    The caller's mappings are copied, never mutated, and parameter order is
    kept. A body stream is wrapped so the transport can re-read it; for a
    sized body at most ``body.length`` bytes are exposed, and for a
    chunked body at most ``body.limit``.

    Raises:
        ClientError: If wrapping the body stream fails with an I/O error.
    """
    wrapped_body = None
    if body is not None:
        try:
            limit = body.length if body.length is not None else body.limit
            stream = new_repeatable_stream(body.stream, limit=limit)
        except OSError as exc:
            logger.error("Cannot wrap to repeatable input stream: %s", exc)
            raise ClientError(f"Cannot wrap to repeatable input stream: {exc}") from exc
        wrapped_body = RequestBody(stream, body.length, body.limit)

    return RequestMessage(
        endpoint=endpoint,
        method=method,
        bucket=bucket,
        key=key,
        parameters=tuple((parameters or {}).items()),
        headers=MappingProxyType(dict(headers or {})),
        body=wrapped_body,
        path_style=path_style,
    )
