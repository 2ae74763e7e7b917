"""Parameter and header builders for the multipart upload operations.

Each ``build_*`` function validates a typed request and returns the query
parameters and headers for it. Parameters are returned as insertion-ordered
dicts and the order is significant: listing requests put their subresource
or marker parameter first so the canonical query string used for signing is
stable. A parameter value of ``None`` marks a bare subresource (``?uploads``).

Validation failures raise ``UsageError`` subclasses; nothing here performs
I/O.
"""

from __future__ import annotations

from typing import NamedTuple

from ossclient import headers as h
from ossclient.errors import MissingArgument, RangeError, UsageError
from ossclient.messages import get_message
from ossclient.models import (
    AbortMultipartUploadRequest,
    CannedAccessControlList,
    CompleteMultipartUploadRequest,
    InitiateMultipartUploadRequest,
    ListMultipartUploadsRequest,
    ListPartsRequest,
    UploadPartCopyRequest,
    UploadPartRequest,
)
from ossclient.utils import format_http_date, uri_encode
from ossclient.validation import (
    assert_parameter_not_null,
    check_param_range,
    ensure_bucket_and_key,
    ensure_upload_target,
    validate_bucket_name,
)

LIST_PART_MAX_RETURNS = 1000
LIST_UPLOAD_MAX_RETURNS = 1000
MAX_PART_NUMBER = 10000
DEFAULT_FILE_SIZE_LIMIT = 5 * 1024 * 1024 * 1024

Parameters = dict[str, str | None]
Headers = dict[str, str]


class RequestParts(NamedTuple):
    """Ordered parameters and headers produced for one request."""

    parameters: Parameters
    headers: Headers


# ---------------------------------------------------------------------------
# Per-operation builders
# ---------------------------------------------------------------------------


def build_abort_multipart_upload(request: AbortMultipartUploadRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    ensure_upload_target(request.bucket_name, request.key, request.upload_id)
    return RequestParts({h.UPLOAD_ID: request.upload_id}, {})


def build_complete_multipart_upload(request: CompleteMultipartUploadRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    ensure_upload_target(request.bucket_name, request.key, request.upload_id)

    headers: Headers = {}
    populate_complete_multipart_upload_headers(request, headers)
    return RequestParts({h.UPLOAD_ID: request.upload_id}, headers)


def build_initiate_multipart_upload(request: InitiateMultipartUploadRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    ensure_bucket_and_key(request.bucket_name, request.key)

    headers: Headers = {}
    if request.object_metadata is not None:
        headers.update(request.object_metadata.to_headers())

    # The initiate request has an empty body; never send the object's
    # total size as its content length.
    remove_header(headers, h.CONTENT_LENGTH)

    return RequestParts({h.SUBRESOURCE_UPLOADS: None}, headers)


def build_list_multipart_uploads(request: ListMultipartUploadsRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    assert_parameter_not_null(request.bucket_name, "bucket_name")
    validate_bucket_name(request.bucket_name)

    params: Parameters = {}
    populate_list_multipart_uploads_parameters(request, params)
    return RequestParts(params, {})


def build_list_parts(request: ListPartsRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    ensure_upload_target(request.bucket_name, request.key, request.upload_id)

    params: Parameters = {}
    populate_list_parts_parameters(request, params)
    return RequestParts(params, {})


def build_upload_part(request: UploadPartRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    ensure_upload_target(request.bucket_name, request.key, request.upload_id)

    if request.input_stream is None:
        raise MissingArgument("input_stream", get_message("MustSetContentStream"))

    check_part_number(request.part_number)

    headers: Headers = {}
    populate_upload_part_headers(request, headers)

    params: Parameters = {
        h.PART_NUMBER: str(request.part_number),
        h.UPLOAD_ID: request.upload_id,
    }
    return RequestParts(params, headers)


def build_upload_part_copy(request: UploadPartCopyRequest) -> RequestParts:
    assert_parameter_not_null(request, "request")
    ensure_upload_target(request.bucket_name, request.key, request.upload_id)
    ensure_bucket_and_key(
        request.source_bucket_name, request.source_key, "source_bucket_name", "source_key"
    )

    if request.part_size is not None:
        check_part_size(request.part_size)
    check_part_number(request.part_number)

    headers: Headers = {}
    populate_copy_part_headers(request, headers)

    params: Parameters = {
        h.PART_NUMBER: str(request.part_number),
        h.UPLOAD_ID: request.upload_id,
    }
    return RequestParts(params, headers)


# ---------------------------------------------------------------------------
# Range checks
# ---------------------------------------------------------------------------


def check_part_number(part_number: int) -> None:
    """Require ``0 < part_number <= MAX_PART_NUMBER``."""
    if not check_param_range(part_number, 0, False, MAX_PART_NUMBER, True):
        raise RangeError(
            "part_number",
            part_number,
            MAX_PART_NUMBER,
            get_message("PartNumberOutOfRange", MAX_PART_NUMBER),
        )


def check_part_size(part_size: int) -> None:
    """Require ``0 <= part_size <= DEFAULT_FILE_SIZE_LIMIT``."""
    if not check_param_range(part_size, 0, True, DEFAULT_FILE_SIZE_LIMIT, True):
        raise RangeError(
            "part_size",
            part_size,
            DEFAULT_FILE_SIZE_LIMIT,
            get_message("FileSizeOutOfRange", DEFAULT_FILE_SIZE_LIMIT),
        )


# ---------------------------------------------------------------------------
# Populate helpers
# ---------------------------------------------------------------------------


def populate_list_multipart_uploads_parameters(
    request: ListMultipartUploadsRequest, params: Parameters
) -> None:
    # 'uploads' must be the first parameter.
    params[h.SUBRESOURCE_UPLOADS] = None

    if request.delimiter is not None:
        params[h.DELIMITER] = request.delimiter

    if request.key_marker is not None:
        params[h.KEY_MARKER] = request.key_marker

    max_uploads = request.max_uploads
    if max_uploads is not None:
        if not check_param_range(max_uploads, 0, False, LIST_UPLOAD_MAX_RETURNS, True):
            raise RangeError(
                "max_uploads",
                max_uploads,
                LIST_UPLOAD_MAX_RETURNS,
                get_message("MaxUploadsOutOfRange", LIST_UPLOAD_MAX_RETURNS),
            )
        params[h.MAX_UPLOADS] = str(max_uploads)

    if request.prefix is not None:
        params[h.PREFIX] = request.prefix

    if request.upload_id_marker is not None:
        params[h.UPLOAD_ID_MARKER] = request.upload_id_marker


def populate_list_parts_parameters(request: ListPartsRequest, params: Parameters) -> None:
    # 'uploadId' must be the first parameter.
    params[h.UPLOAD_ID] = request.upload_id

    max_parts = request.max_parts
    if max_parts is not None:
        if not check_param_range(max_parts, 0, False, LIST_PART_MAX_RETURNS, True):
            raise RangeError(
                "max_parts",
                max_parts,
                LIST_PART_MAX_RETURNS,
                get_message("MaxPartsOutOfRange", LIST_PART_MAX_RETURNS),
            )
        params[h.MAX_PARTS] = str(max_parts)

    marker = request.part_number_marker
    if marker is not None:
        if not check_param_range(marker, 0, True, MAX_PART_NUMBER, True):
            raise RangeError(
                "part_number_marker",
                marker,
                MAX_PART_NUMBER,
                get_message("PartNumberMarkerOutOfRange", MAX_PART_NUMBER),
            )
        params[h.PART_NUMBER_MARKER] = str(marker)


def populate_upload_part_headers(request: UploadPartRequest, headers: Headers) -> None:
    if not request.use_chunk_encoding:
        check_part_size(request.part_size)
        headers[h.CONTENT_LENGTH] = str(request.part_size)

    if request.md5_digest is not None:
        headers[h.CONTENT_MD5] = request.md5_digest


def populate_copy_part_headers(request: UploadPartCopyRequest, headers: Headers) -> None:
    if request.part_size is not None:
        headers[h.CONTENT_LENGTH] = str(request.part_size)

    if request.md5_digest is not None:
        headers[h.CONTENT_MD5] = request.md5_digest

    headers[h.COPY_OBJECT_SOURCE] = (
        f"/{request.source_bucket_name}/{uri_encode(request.source_key)}"
    )

    if request.begin_index is not None and request.part_size is not None:
        end = request.begin_index + request.part_size - 1
        headers[h.COPY_SOURCE_RANGE] = f"bytes={request.begin_index}-{end}"

    if request.modified_since_constraint is not None:
        headers[h.COPY_OBJECT_SOURCE_IF_MODIFIED_SINCE] = format_http_date(
            request.modified_since_constraint
        )
    if request.unmodified_since_constraint is not None:
        headers[h.COPY_OBJECT_SOURCE_IF_UNMODIFIED_SINCE] = format_http_date(
            request.unmodified_since_constraint
        )

    add_string_list_header(
        headers, h.COPY_OBJECT_SOURCE_IF_MATCH, request.matching_etag_constraints
    )
    add_string_list_header(
        headers, h.COPY_OBJECT_SOURCE_IF_NONE_MATCH, request.nonmatching_etag_constraints
    )


def populate_complete_multipart_upload_headers(
    request: CompleteMultipartUploadRequest, headers: Headers
) -> None:
    """Populate optional headers for CompleteMultipartUpload.

    A canned ACL on the request is validated but no ``x-oss-object-acl``
    header is emitted: service support for setting the ACL at completion
    time is unconfirmed, so ``headers`` is left unchanged.
    """
    if request.object_acl is not None:
        try:
            CannedAccessControlList(request.object_acl)
        except ValueError:
            allowed = "/".join(a.value for a in CannedAccessControlList)
            raise UsageError(get_message("UnsupportedAcl", allowed))


# ---------------------------------------------------------------------------
# Header helpers
# ---------------------------------------------------------------------------


def add_string_list_header(headers: Headers, name: str, values: list[str] | None) -> None:
    """Set ``name`` to the comma-joined ``values`` when there are any."""
    if values:
        headers[name] = ", ".join(values)


def remove_header(headers: Headers, name: str) -> None:
    """Remove every header matching ``name`` case-insensitively."""
    lower = name.lower()
    for existing in [k for k in headers if k.lower() == lower]:
        del headers[existing]
