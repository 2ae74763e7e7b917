"""Shared client context and the send/parse dispatch step."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from ossclient import metrics
from ossclient.auth import CredentialsProvider, RequestSigner
from ossclient.comm import RequestMessage, ResponseMessage, Transport
from ossclient.errors import ResponseParseError
from ossclient.parsers import parse_error_response

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ClientContext:
    """Everything an operation needs to reach the service.

    Attributes:
        endpoint: Service endpoint URL.
        transport: Sends request descriptors.
        credentials_provider: Supplies credentials for each request.
        signer: Adds authentication headers; None sends requests unsigned.
        path_style: Address buckets in the path instead of the host name.
    """

    endpoint: str
    transport: Transport
    credentials_provider: CredentialsProvider | None = None
    signer: RequestSigner | None = None
    path_style: bool = False


def do_operation(
    context: ClientContext,
    request: RequestMessage,
    parser: Callable[[ResponseMessage], T],
    operation: str,
) -> T:
    """Sign and send ``request``, then parse the response.

    Args:
        context: The client context.
        request: The assembled request descriptor.
        parser: Converts a successful response into the typed result.
        operation: Operation name used in logs and metrics.

    Returns:
        Whatever ``parser`` returns.

    Raises:
        ServiceError: If the service answered with a non-success status.
        ResponseParseError: If a successful response could not be decoded.
        ClientError: If the transport could not reach the service.
    """
    log_extra = {"operation": operation, "bucket": request.bucket, "key": request.key}

    if context.signer is not None and context.credentials_provider is not None:
        request = context.signer.sign(request, context.credentials_provider.get_credentials())

    logger.debug("%s %s", request.method.value, request.url, extra=log_extra)
    start = time.monotonic()
    response = context.transport.send(request)
    duration_ms = round((time.monotonic() - start) * 1000, 2)

    log_extra.update(
        status=response.status_code,
        duration_ms=duration_ms,
        request_id=response.request_id,
    )

    if not response.is_successful:
        error = parse_error_response(response)
        logger.warning(
            "%s failed: %s (status %d)",
            operation,
            error.code,
            response.status_code,
            extra=log_extra,
        )
        metrics.record_operation(operation, "error")
        raise error

    try:
        result = parser(response)
    except ResponseParseError:
        metrics.record_operation(operation, "parse_error")
        raise

    logger.debug("%s completed in %.2f ms", operation, duration_ms, extra=log_extra)
    metrics.record_operation(operation, "ok")
    if request.body is not None:
        metrics.record_bytes_sent(request.body.length)
    return result
