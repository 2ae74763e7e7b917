"""Error definitions for the ossclient multipart client.

Every failure raised by a client call derives from ``OSSError`` and falls in
exactly one of four families:

    - ``UsageError``: the caller passed something invalid. Raised before any
      request is sent.
    - ``ClientError``: a local fault (I/O while preparing a body, transport
      failure).
    - ``ServiceError``: the service answered with a non-success status.
    - ``ResponseParseError``: the service answered successfully but the
      response did not have the expected shape.
"""

from __future__ import annotations


class OSSError(Exception):
    """Base class for all ossclient errors."""


# -- Usage errors -------------------------------------------------------------


class UsageError(OSSError, ValueError):
    """The caller supplied a missing or invalid argument."""


class MissingArgument(UsageError):
    """A required argument was None or empty.

    Attributes:
        name: The argument name.
    """

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"The parameter '{name}' must not be null or empty.")
        self.name = name


class RangeError(UsageError):
    """A numeric argument fell outside its allowed range.

    Attributes:
        name: The argument name.
        value: The rejected value.
        limit: The configured upper limit for the argument.
    """

    def __init__(self, name: str, value: int, limit: int, message: str) -> None:
        super().__init__(message)
        self.name = name
        self.value = value
        self.limit = limit


class InvalidBucketName(UsageError):
    """The bucket name violates the bucket naming rules."""

    def __init__(self, bucket: str = "") -> None:
        super().__init__(f"The bucket name '{bucket}' is invalid.")
        self.bucket = bucket


class InvalidObjectKey(UsageError):
    """The object key violates the object key rules."""

    def __init__(self, key: str = "") -> None:
        super().__init__(f"The object key '{key}' is invalid.")
        self.key = key


# -- Client-side faults -------------------------------------------------------


class ClientError(OSSError):
    """A local failure while preparing or transmitting a request.

    The original exception is available as ``__cause__``.
    """


# -- Response parse failures --------------------------------------------------


class ResponseParseError(OSSError):
    """The response body or headers did not match the expected structure."""


# -- Service errors -----------------------------------------------------------


class ServiceError(OSSError):
    """An error reported by the storage service.

    Attributes:
        code: The service error code (e.g. "NoSuchUpload").
        message: Human-readable error description from the service.
        http_status: The HTTP status code of the response.
        request_id: The service-assigned request identifier.
        host_id: The service host identifier, if returned.
        extra_fields: Any other elements present in the error document.
    """

    def __init__(
        self,
        code: str,
        message: str,
        http_status: int = 400,
        request_id: str = "",
        host_id: str = "",
        extra_fields: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.request_id = request_id
        self.host_id = host_id
        self.extra_fields = extra_fields or {}

    def __str__(self) -> str:
        text = f"{self.code} ({self.http_status}): {self.message}"
        if self.request_id:
            text += f" [RequestId: {self.request_id}]"
        return text


class AccessDenied(ServiceError):
    """Access denied."""


class NoSuchBucket(ServiceError):
    """The specified bucket does not exist."""


class NoSuchKey(ServiceError):
    """The specified key does not exist."""


class NoSuchUpload(ServiceError):
    """The specified multipart upload does not exist."""


class InvalidArgument(ServiceError):
    """The service rejected an argument."""


class InvalidPart(ServiceError):
    """One or more of the specified parts could not be found."""


class InvalidPartOrder(ServiceError):
    """The list of parts was not in ascending order."""


class EntityTooLarge(ServiceError):
    """The proposed upload exceeds the maximum allowed object size."""


class EntityTooSmall(ServiceError):
    """The proposed upload is smaller than the minimum allowed object size."""


class MalformedXML(ServiceError):
    """The XML sent was not well-formed or did not validate."""


class PreconditionFailed(ServiceError):
    """At least one of the copy preconditions did not hold."""


class SignatureDoesNotMatch(ServiceError):
    """The request signature does not match."""


class InvalidAccessKeyId(ServiceError):
    """The access key id does not exist in the service's records."""


class RequestTimeTooSkewed(ServiceError):
    """The request time differs too much from the service's clock."""


class InvalidRange(ServiceError):
    """The requested copy range is not satisfiable."""


class InternalError(ServiceError):
    """The service encountered an internal error."""


class NotImplementedByService(ServiceError):
    """The service does not implement the requested functionality."""


_SERVICE_ERRORS: dict[str, type[ServiceError]] = {
    "AccessDenied": AccessDenied,
    "NoSuchBucket": NoSuchBucket,
    "NoSuchKey": NoSuchKey,
    "NoSuchUpload": NoSuchUpload,
    "InvalidArgument": InvalidArgument,
    "InvalidPart": InvalidPart,
    "InvalidPartOrder": InvalidPartOrder,
    "EntityTooLarge": EntityTooLarge,
    "EntityTooSmall": EntityTooSmall,
    "MalformedXML": MalformedXML,
    "PreconditionFailed": PreconditionFailed,
    "SignatureDoesNotMatch": SignatureDoesNotMatch,
    "InvalidAccessKeyId": InvalidAccessKeyId,
    "RequestTimeTooSkewed": RequestTimeTooSkewed,
    "InvalidRange": InvalidRange,
    "InternalError": InternalError,
    "NotImplemented": NotImplementedByService,
}


def service_error_for(
    code: str,
    message: str,
    http_status: int,
    request_id: str = "",
    host_id: str = "",
    extra_fields: dict[str, str] | None = None,
) -> ServiceError:
    """Build the ``ServiceError`` subclass registered for ``code``.

    Unknown codes produce a plain ``ServiceError``.
    """
    cls = _SERVICE_ERRORS.get(code, ServiceError)
    return cls(
        code=code,
        message=message,
        http_status=http_status,
        request_id=request_id,
        host_id=host_id,
        extra_fields=extra_fields,
    )
