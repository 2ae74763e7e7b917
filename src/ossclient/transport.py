"""httpx-backed transport for request descriptors.

The transport knows nothing about multipart semantics: it renders a
``RequestMessage`` onto the wire and hands back a ``ResponseMessage``.
Connection failures and timeouts surface as ``ClientError``.
"""

from __future__ import annotations

import logging

import httpx

from ossclient import __version__
from ossclient import headers as h
from ossclient.comm import RequestMessage, ResponseMessage
from ossclient.errors import ClientError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"ossclient-python/{__version__}"


class HttpxTransport:
    """Sends request descriptors with a shared ``httpx.Client``.

    The underlying client is safe to share between threads, so one transport
    may serve concurrent callers.

    Attributes:
        user_agent: Value sent in the User-Agent header.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.Client | None = None,
    ) -> None:
        self.user_agent = user_agent
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, request: RequestMessage) -> ResponseMessage:
        """Send ``request`` and read the whole response body.

        Raises:
            ClientError: If the request could not be sent or the response
                could not be read.
        """
        headers = httpx.Headers(dict(request.headers))
        headers.setdefault(h.USER_AGENT, self.user_agent)

        content = None
        body = request.body
        if body is None:
            # UploadPartCopy describes the copied size in Content-Length;
            # nothing is actually sent.
            headers.pop(h.CONTENT_LENGTH, None)
        else:
            if body.length is not None:
                headers.setdefault(h.CONTENT_LENGTH, str(body.length))
            if body.length == 0:
                content = b""
            else:
                content = body.stream.iter_chunks()

        try:
            response = self._client.request(
                request.method.value,
                request.url,
                headers=headers,
                content=content,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Transport failure for %s %s: %s", request.method.value, request.url, exc
            )
            raise ClientError(f"Failed to send {request.method.value} request: {exc}") from exc

        return ResponseMessage(
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
        )

    def close(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            self._client.close()
