"""Response parsers for the multipart upload operations.

Every parser takes a successful ``ResponseMessage`` and returns a typed
result or raises ``ResponseParseError``; none returns a partial result.
``parse_error_response`` is the error path used for non-success statuses.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from ossclient import headers as h
from ossclient.comm import ResponseMessage
from ossclient.errors import ResponseParseError, ServiceError, service_error_for
from ossclient.models import (
    CompleteMultipartUploadResult,
    InitiateMultipartUploadResult,
    MultipartUpload,
    MultipartUploadListing,
    PartListing,
    PartSummary,
    UploadPartCopyResult,
    UploadPartResult,
)
from ossclient.utils import trim_quotes
from ossclient.xml_utils import XmlDocument

logger = logging.getLogger(__name__)

_ISO8601_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")


# ---------------------------------------------------------------------------
# Scalar conversions
# ---------------------------------------------------------------------------


def _to_int(value: str | None, name: str) -> int | None:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ResponseParseError(f"<{name}> is not an integer: {value!r}") from exc


def _to_required_int(value: str, name: str) -> int:
    result = _to_int(value, name)
    if result is None:
        raise ResponseParseError(f"<{name}> is empty")
    return result


def _to_bool(value: str | None, name: str) -> bool:
    if value is None:
        return False
    lowered = value.strip().lower()
    if lowered not in ("true", "false"):
        raise ResponseParseError(f"<{name}> is not a boolean: {value!r}")
    return lowered == "true"


def parse_iso8601(value: str | None) -> datetime | None:
    """Parse a service timestamp such as ``2024-02-23T04:18:23.000Z``.

    Raises:
        ResponseParseError: If the value is present but not a timestamp.
    """
    if not value:
        return None
    for fmt in _ISO8601_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ResponseParseError(f"Invalid timestamp: {value!r}")


def _empty_to_none(value: str | None) -> str | None:
    return value if value else None


# ---------------------------------------------------------------------------
# Header-only responses
# ---------------------------------------------------------------------------


def parse_empty_response(response: ResponseMessage) -> None:
    """Accept a successful response whose body carries no result."""
    return None


class UploadPartResponseParser:
    """Builds an UploadPartResult from the ETag response header.

    The service does not echo the part number, so the parser is created with
    the number the part was uploaded under.
    """

    def __init__(self, part_number: int) -> None:
        self.part_number = part_number

    def __call__(self, response: ResponseMessage) -> UploadPartResult:
        etag = response.headers.get(h.ETAG)
        if etag is None:
            raise ResponseParseError("UploadPart response is missing the ETag header")
        return UploadPartResult(part_number=self.part_number, etag=trim_quotes(etag))


# ---------------------------------------------------------------------------
# XML responses
# ---------------------------------------------------------------------------


class UploadPartCopyResponseParser:
    """Decodes a CopyPartResult and attaches the part number it was made for."""

    def __init__(self, part_number: int) -> None:
        self.part_number = part_number

    def __call__(self, response: ResponseMessage) -> UploadPartCopyResult:
        doc = XmlDocument.parse(response.content, "CopyPartResult")
        return UploadPartCopyResult(
            part_number=self.part_number,
            etag=trim_quotes(doc.required_text("ETag")),
            last_modified=parse_iso8601(doc.text("LastModified")),
        )


def parse_initiate_multipart_upload(response: ResponseMessage) -> InitiateMultipartUploadResult:
    doc = XmlDocument.parse(response.content, "InitiateMultipartUploadResult")
    upload_id = doc.required_text("UploadId")
    if not upload_id:
        raise ResponseParseError("InitiateMultipartUploadResult has an empty <UploadId>")
    return InitiateMultipartUploadResult(
        bucket_name=doc.required_text("Bucket"),
        key=doc.required_text("Key"),
        upload_id=upload_id,
    )


def parse_complete_multipart_upload(response: ResponseMessage) -> CompleteMultipartUploadResult:
    doc = XmlDocument.parse(response.content, "CompleteMultipartUploadResult")
    return CompleteMultipartUploadResult(
        bucket_name=doc.required_text("Bucket"),
        key=doc.required_text("Key"),
        etag=trim_quotes(doc.required_text("ETag")),
        location=doc.text("Location") or "",
    )


def parse_list_multipart_uploads(response: ResponseMessage) -> MultipartUploadListing:
    """Decode a ListMultipartUploadsResult page.

    Uploads and common prefixes keep the order the service returned them in.
    """
    doc = XmlDocument.parse(response.content, "ListMultipartUploadsResult")

    uploads = []
    for elem in doc.findall("Upload"):
        uploads.append(
            MultipartUpload(
                key=doc.required_text("Key", elem),
                upload_id=doc.required_text("UploadId", elem),
                storage_class=doc.text("StorageClass", elem) or "",
                initiated=parse_iso8601(doc.text("Initiated", elem)),
            )
        )

    common_prefixes = []
    for elem in doc.findall("CommonPrefixes"):
        common_prefixes.append(doc.required_text("Prefix", elem))

    return MultipartUploadListing(
        bucket_name=doc.required_text("Bucket"),
        uploads=tuple(uploads),
        common_prefixes=tuple(common_prefixes),
        is_truncated=_to_bool(doc.text("IsTruncated"), "IsTruncated"),
        key_marker=_empty_to_none(doc.text("KeyMarker")),
        upload_id_marker=_empty_to_none(doc.text("UploadIdMarker")),
        next_key_marker=_empty_to_none(doc.text("NextKeyMarker")),
        next_upload_id_marker=_empty_to_none(doc.text("NextUploadIdMarker")),
        max_uploads=_to_int(doc.text("MaxUploads"), "MaxUploads"),
        delimiter=_empty_to_none(doc.text("Delimiter")),
        prefix=_empty_to_none(doc.text("Prefix")),
    )


def parse_list_parts(response: ResponseMessage) -> PartListing:
    """Decode a ListPartsResult page. Parts keep the service order."""
    doc = XmlDocument.parse(response.content, "ListPartsResult")

    parts = []
    for elem in doc.findall("Part"):
        parts.append(
            PartSummary(
                part_number=_to_required_int(doc.required_text("PartNumber", elem), "PartNumber"),
                etag=trim_quotes(doc.required_text("ETag", elem)),
                size=_to_required_int(doc.required_text("Size", elem), "Size"),
                last_modified=parse_iso8601(doc.text("LastModified", elem)),
            )
        )

    return PartListing(
        bucket_name=doc.required_text("Bucket"),
        key=doc.required_text("Key"),
        upload_id=doc.required_text("UploadId"),
        parts=tuple(parts),
        is_truncated=_to_bool(doc.text("IsTruncated"), "IsTruncated"),
        part_number_marker=_to_int(doc.text("PartNumberMarker"), "PartNumberMarker"),
        next_part_number_marker=_to_int(doc.text("NextPartNumberMarker"), "NextPartNumberMarker"),
        max_parts=_to_int(doc.text("MaxParts"), "MaxParts"),
        storage_class=doc.text("StorageClass") or "",
    )


# ---------------------------------------------------------------------------
# Error path
# ---------------------------------------------------------------------------

_ERROR_STANDARD_FIELDS = {"Code", "Message", "RequestId", "HostId"}


def parse_error_response(response: ResponseMessage) -> ServiceError:
    """Decode a non-success response into a ServiceError.

    The error document has the shape::

        <Error><Code/><Message/><RequestId/><HostId/>...</Error>

    A missing or unreadable body still yields a ServiceError, built from the
    status code and the request-id header.
    """
    code = ""
    message = ""
    request_id = response.request_id
    host_id = ""
    extra: dict[str, str] = {}

    if response.content:
        try:
            root = ET.fromstring(response.content)
        except ET.ParseError:
            logger.debug("Unparseable error body (status %d)", response.status_code)
        else:
            doc = XmlDocument(root)
            code = doc.text("Code") or ""
            message = doc.text("Message") or ""
            request_id = doc.text("RequestId") or request_id
            host_id = doc.text("HostId") or ""
            for child in root:
                name = doc.local_name(child)
                if name not in _ERROR_STANDARD_FIELDS:
                    extra[name] = child.text or ""

    if not code:
        code = f"Http{response.status_code}"
    if not message:
        message = f"The service returned HTTP status {response.status_code}."

    return service_error_for(
        code=code,
        message=message,
        http_status=response.status_code,
        request_id=request_id,
        host_id=host_id,
        extra_fields=extra,
    )
