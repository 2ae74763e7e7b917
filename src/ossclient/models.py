"""Request and result types for the multipart upload operations.

Requests are plain mutable dataclasses filled in by the caller. Results are
frozen dataclasses carrying only what the service returns for the
corresponding operation; none of them keeps a reference to the request that
produced it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO

from ossclient import headers as h
from ossclient.utils import format_http_date


class CannedAccessControlList(str, enum.Enum):
    """Canned ACLs accepted by the service."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"


@dataclass
class ObjectMetadata:
    """Object metadata sent when a multipart upload is initiated.

    Attributes:
        user_metadata: User metadata, sent as ``x-oss-meta-<name>`` headers.
        raw_metadata: Standard HTTP headers (Content-Type, Cache-Control, ...).
            ``datetime`` values are rendered as HTTP dates.
    """

    user_metadata: dict[str, str] = field(default_factory=dict)
    raw_metadata: dict[str, object] = field(default_factory=dict)

    @property
    def content_length(self) -> int | None:
        value = self.raw_metadata.get(h.CONTENT_LENGTH)
        return int(value) if value is not None else None

    @content_length.setter
    def content_length(self, value: int) -> None:
        self.raw_metadata[h.CONTENT_LENGTH] = value

    @property
    def content_type(self) -> str | None:
        return self.raw_metadata.get(h.CONTENT_TYPE)

    @content_type.setter
    def content_type(self, value: str) -> None:
        self.raw_metadata[h.CONTENT_TYPE] = value

    def to_headers(self) -> dict[str, str]:
        """Render this metadata as request headers."""
        result: dict[str, str] = {}
        for name, value in self.raw_metadata.items():
            if value is None:
                continue
            if isinstance(value, datetime):
                result[name] = format_http_date(value)
            else:
                result[name] = str(value)
        for name, value in self.user_metadata.items():
            result[h.OSS_USER_METADATA_PREFIX + name] = value
        return result


@dataclass(frozen=True)
class PartETag:
    """A part number paired with the ETag the service returned for it."""

    part_number: int
    etag: str


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass
class InitiateMultipartUploadRequest:
    bucket_name: str
    key: str
    object_metadata: ObjectMetadata | None = None


@dataclass
class AbortMultipartUploadRequest:
    bucket_name: str
    key: str
    upload_id: str


@dataclass
class CompleteMultipartUploadRequest:
    """Request to assemble the uploaded parts into the final object.

    Attributes:
        part_etags: Parts to assemble, marshalled in the order given.
        object_acl: Accepted and validated but not sent; see
            ``builders.populate_complete_multipart_upload_headers``.
    """

    bucket_name: str
    key: str
    upload_id: str
    part_etags: list[PartETag] = field(default_factory=list)
    object_acl: CannedAccessControlList | None = None


@dataclass
class ListMultipartUploadsRequest:
    bucket_name: str
    delimiter: str | None = None
    key_marker: str | None = None
    max_uploads: int | None = None
    prefix: str | None = None
    upload_id_marker: str | None = None


@dataclass
class ListPartsRequest:
    bucket_name: str
    key: str
    upload_id: str
    max_parts: int | None = None
    part_number_marker: int | None = None


@dataclass
class UploadPartRequest:
    """Request to upload one part from a byte stream.

    Attributes:
        input_stream: Binary stream positioned at the first byte of the part.
            At most ``part_size`` bytes are read from it. The caller keeps
            ownership and is responsible for closing it.
        part_size: Number of bytes in the part. Required unless
            ``use_chunk_encoding`` is set; with chunked encoding a
            non-negative size still bounds how much of the stream is sent.
        md5_digest: Optional base64 MD5 of the part, sent as Content-MD5.
        use_chunk_encoding: Send the part with chunked transfer encoding.
    """

    bucket_name: str
    key: str
    upload_id: str
    part_number: int
    input_stream: BinaryIO | None = None
    part_size: int = -1
    md5_digest: str | None = None
    use_chunk_encoding: bool = False


@dataclass
class UploadPartCopyRequest:
    """Request to upload a part by copying a range of an existing object.

    Attributes:
        begin_index: First byte of the source range. A range header is only
            sent when both ``begin_index`` and ``part_size`` are set.
        part_size: Number of bytes to copy.
        matching_etag_constraints: Copy only if the source ETag is one of these.
        nonmatching_etag_constraints: Copy only if the source ETag is none of these.
        modified_since_constraint: Copy only if modified after this time.
        unmodified_since_constraint: Copy only if not modified after this time.
    """

    source_bucket_name: str
    source_key: str
    bucket_name: str
    key: str
    upload_id: str
    part_number: int
    begin_index: int | None = None
    part_size: int | None = None
    md5_digest: str | None = None
    matching_etag_constraints: list[str] = field(default_factory=list)
    nonmatching_etag_constraints: list[str] = field(default_factory=list)
    modified_since_constraint: datetime | None = None
    unmodified_since_constraint: datetime | None = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InitiateMultipartUploadResult:
    bucket_name: str
    key: str
    upload_id: str


@dataclass(frozen=True)
class CompleteMultipartUploadResult:
    bucket_name: str
    key: str
    etag: str
    location: str = ""


@dataclass(frozen=True)
class UploadPartResult:
    part_number: int
    etag: str

    @property
    def part_etag(self) -> PartETag:
        return PartETag(self.part_number, self.etag)


@dataclass(frozen=True)
class UploadPartCopyResult:
    part_number: int
    etag: str
    last_modified: datetime | None = None

    @property
    def part_etag(self) -> PartETag:
        return PartETag(self.part_number, self.etag)


@dataclass(frozen=True)
class MultipartUpload:
    """An in-progress upload returned by ListMultipartUploads."""

    key: str
    upload_id: str
    storage_class: str = ""
    initiated: datetime | None = None


@dataclass(frozen=True)
class MultipartUploadListing:
    """One page of ListMultipartUploads results.

    Attributes:
        uploads: Uploads in the order the service returned them.
        is_truncated: Whether more uploads remain after this page.
        next_key_marker: Pass as ``key_marker`` to fetch the next page.
        next_upload_id_marker: Pass as ``upload_id_marker`` for the next page.
    """

    bucket_name: str
    uploads: tuple[MultipartUpload, ...] = ()
    common_prefixes: tuple[str, ...] = ()
    is_truncated: bool = False
    key_marker: str | None = None
    upload_id_marker: str | None = None
    next_key_marker: str | None = None
    next_upload_id_marker: str | None = None
    max_uploads: int | None = None
    delimiter: str | None = None
    prefix: str | None = None


@dataclass(frozen=True)
class PartSummary:
    part_number: int
    etag: str
    size: int
    last_modified: datetime | None = None


@dataclass(frozen=True)
class PartListing:
    """One page of ListParts results.

    Attributes:
        parts: Parts in ascending part-number order, as returned.
        next_part_number_marker: Pass as ``part_number_marker`` for the next page.
    """

    bucket_name: str
    key: str
    upload_id: str
    parts: tuple[PartSummary, ...] = ()
    is_truncated: bool = False
    part_number_marker: int | None = None
    next_part_number_marker: int | None = None
    max_parts: int | None = None
    storage_class: str = ""
