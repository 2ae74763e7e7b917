"""Tests for the multipart parameter and header builders."""

import io
from datetime import datetime, timezone

import pytest

from ossclient import headers as h
from ossclient.builders import (
    DEFAULT_FILE_SIZE_LIMIT,
    add_string_list_header,
    build_abort_multipart_upload,
    build_complete_multipart_upload,
    build_initiate_multipart_upload,
    build_list_multipart_uploads,
    build_list_parts,
    build_upload_part,
    build_upload_part_copy,
    remove_header,
)
from ossclient.errors import (
    InvalidBucketName,
    InvalidObjectKey,
    MissingArgument,
    RangeError,
    UsageError,
)
from ossclient.models import (
    AbortMultipartUploadRequest,
    CompleteMultipartUploadRequest,
    InitiateMultipartUploadRequest,
    ListMultipartUploadsRequest,
    ListPartsRequest,
    ObjectMetadata,
    PartETag,
    UploadPartCopyRequest,
    UploadPartRequest,
)


def _upload_part(**kwargs) -> UploadPartRequest:
    defaults = dict(
        bucket_name="bucket",
        key="key",
        upload_id="u1",
        part_number=1,
        input_stream=io.BytesIO(b"data"),
        part_size=4,
    )
    defaults.update(kwargs)
    return UploadPartRequest(**defaults)


def _copy_part(**kwargs) -> UploadPartCopyRequest:
    defaults = dict(
        source_bucket_name="src-bucket",
        source_key="src/key.bin",
        bucket_name="bucket",
        key="key",
        upload_id="u1",
        part_number=1,
    )
    defaults.update(kwargs)
    return UploadPartCopyRequest(**defaults)


class TestAbortAndComplete:
    """Tests for the abort and complete builders."""

    def test_abort_parameters(self):
        """Abort sends only the uploadId parameter."""
        params, headers = build_abort_multipart_upload(
            AbortMultipartUploadRequest("bucket", "key", "u1")
        )
        assert params == {"uploadId": "u1"}
        assert headers == {}

    def test_abort_missing_upload_id(self):
        """An empty upload id is a usage error."""
        with pytest.raises(MissingArgument) as exc_info:
            build_abort_multipart_upload(AbortMultipartUploadRequest("bucket", "key", ""))
        assert exc_info.value.name == "upload_id"

    def test_abort_missing_key(self):
        """A None key is a usage error."""
        with pytest.raises(MissingArgument):
            build_abort_multipart_upload(AbortMultipartUploadRequest("bucket", None, "u1"))

    def test_invalid_bucket_name(self):
        """A malformed bucket name is rejected before anything else."""
        with pytest.raises(InvalidBucketName):
            build_abort_multipart_upload(AbortMultipartUploadRequest("Bad_Bucket", "key", "u1"))

    def test_invalid_key(self):
        """A key with a leading slash is rejected."""
        with pytest.raises(InvalidObjectKey):
            build_abort_multipart_upload(AbortMultipartUploadRequest("bucket", "/key", "u1"))

    def test_complete_parameters(self):
        """Complete sends only the uploadId parameter."""
        params, headers = build_complete_multipart_upload(
            CompleteMultipartUploadRequest("bucket", "key", "u1", [PartETag(1, "a")])
        )
        assert params == {"uploadId": "u1"}
        assert headers == {}

    def test_complete_acl_emits_no_header(self):
        """A valid canned ACL is accepted but not sent."""
        params, headers = build_complete_multipart_upload(
            CompleteMultipartUploadRequest("bucket", "key", "u1", object_acl="public-read")
        )
        assert h.OSS_OBJECT_ACL not in headers

    def test_complete_unknown_acl(self):
        """An unknown canned ACL is a usage error."""
        with pytest.raises(UsageError):
            build_complete_multipart_upload(
                CompleteMultipartUploadRequest("bucket", "key", "u1", object_acl="everyone")
            )


class TestInitiate:
    """Tests for build_initiate_multipart_upload()."""

    def test_uploads_subresource(self):
        """Initiate sends the bare 'uploads' subresource."""
        params, _ = build_initiate_multipart_upload(
            InitiateMultipartUploadRequest("bucket", "key")
        )
        assert params == {"uploads": None}

    def test_metadata_copied(self):
        """Object metadata is copied into the request headers."""
        meta = ObjectMetadata(user_metadata={"author": "alice"})
        meta.content_type = "text/plain"
        _, headers = build_initiate_multipart_upload(
            InitiateMultipartUploadRequest("bucket", "key", object_metadata=meta)
        )
        assert headers[h.CONTENT_TYPE] == "text/plain"
        assert headers["x-oss-meta-author"] == "alice"

    def test_content_length_stripped(self):
        """A content length in the metadata is never sent on initiate."""
        meta = ObjectMetadata()
        meta.content_length = 1024
        _, headers = build_initiate_multipart_upload(
            InitiateMultipartUploadRequest("bucket", "key", object_metadata=meta)
        )
        assert h.CONTENT_LENGTH not in headers

    def test_content_length_stripped_any_case(self):
        """Content length is stripped regardless of header name casing."""
        meta = ObjectMetadata(raw_metadata={"content-length": "10"})
        _, headers = build_initiate_multipart_upload(
            InitiateMultipartUploadRequest("bucket", "key", object_metadata=meta)
        )
        assert all(name.lower() != "content-length" for name in headers)

    def test_missing_bucket(self):
        """A None bucket name is a usage error."""
        with pytest.raises(MissingArgument):
            build_initiate_multipart_upload(InitiateMultipartUploadRequest(None, "key"))


class TestListMultipartUploads:
    """Tests for build_list_multipart_uploads()."""

    def test_uploads_first(self):
        """The 'uploads' subresource is always the first parameter."""
        params, _ = build_list_multipart_uploads(
            ListMultipartUploadsRequest(
                "bucket",
                delimiter="/",
                key_marker="k",
                max_uploads=10,
                prefix="p/",
                upload_id_marker="u",
            )
        )
        assert list(params) == [
            "uploads",
            "delimiter",
            "key-marker",
            "max-uploads",
            "prefix",
            "upload-id-marker",
        ]
        assert params["uploads"] is None
        assert params["max-uploads"] == "10"

    def test_only_uploads_when_empty(self):
        """Without options only the subresource is sent."""
        params, _ = build_list_multipart_uploads(ListMultipartUploadsRequest("bucket"))
        assert params == {"uploads": None}

    @pytest.mark.parametrize("value", [1, 1000])
    def test_max_uploads_bounds_accepted(self, value):
        """max_uploads of 1 and 1000 are accepted."""
        params, _ = build_list_multipart_uploads(
            ListMultipartUploadsRequest("bucket", max_uploads=value)
        )
        assert params["max-uploads"] == str(value)

    @pytest.mark.parametrize("value", [0, -1, 1001])
    def test_max_uploads_out_of_range(self, value):
        """max_uploads outside (0, 1000] raises a range error naming the limit."""
        with pytest.raises(RangeError) as exc_info:
            build_list_multipart_uploads(ListMultipartUploadsRequest("bucket", max_uploads=value))
        assert "1000" in str(exc_info.value)
        assert exc_info.value.limit == 1000
        assert exc_info.value.value == value


class TestListParts:
    """Tests for build_list_parts()."""

    def test_upload_id_first(self):
        """uploadId is always the first parameter."""
        params, _ = build_list_parts(
            ListPartsRequest("bucket", "key", "u1", max_parts=5, part_number_marker=3)
        )
        assert list(params) == ["uploadId", "max-parts", "part-number-marker"]
        assert params == {"uploadId": "u1", "max-parts": "5", "part-number-marker": "3"}

    @pytest.mark.parametrize("value", [1, 1000])
    def test_max_parts_bounds_accepted(self, value):
        """max_parts of 1 and 1000 are accepted."""
        params, _ = build_list_parts(ListPartsRequest("bucket", "key", "u1", max_parts=value))
        assert params["max-parts"] == str(value)

    @pytest.mark.parametrize("value", [0, -5, 1001, 2000])
    def test_max_parts_out_of_range(self, value):
        """max_parts outside (0, 1000] raises a range error naming the limit."""
        with pytest.raises(RangeError) as exc_info:
            build_list_parts(ListPartsRequest("bucket", "key", "u1", max_parts=value))
        assert "1000" in str(exc_info.value)

    @pytest.mark.parametrize("value", [0, 10000])
    def test_part_number_marker_bounds_accepted(self, value):
        """part_number_marker of 0 and 10000 are accepted."""
        params, _ = build_list_parts(
            ListPartsRequest("bucket", "key", "u1", part_number_marker=value)
        )
        assert params["part-number-marker"] == str(value)

    @pytest.mark.parametrize("value", [-1, 10001])
    def test_part_number_marker_out_of_range(self, value):
        """part_number_marker outside [0, 10000] raises a range error."""
        with pytest.raises(RangeError):
            build_list_parts(ListPartsRequest("bucket", "key", "u1", part_number_marker=value))


class TestUploadPart:
    """Tests for build_upload_part()."""

    def test_parameter_order(self):
        """partNumber comes before uploadId."""
        params, _ = build_upload_part(_upload_part(part_number=7))
        assert list(params) == ["partNumber", "uploadId"]
        assert params == {"partNumber": "7", "uploadId": "u1"}

    def test_content_length_is_part_size(self):
        """Without chunked encoding Content-Length equals the part size."""
        _, headers = build_upload_part(_upload_part(part_size=4))
        assert headers[h.CONTENT_LENGTH] == "4"

    def test_chunked_omits_content_length(self):
        """Chunked encoding never sends Content-Length, even with a size."""
        _, headers = build_upload_part(_upload_part(part_size=4, use_chunk_encoding=True))
        assert h.CONTENT_LENGTH not in headers

    def test_chunked_skips_size_check(self):
        """Chunked encoding does not validate the part size."""
        build_upload_part(_upload_part(part_size=-1, use_chunk_encoding=True))

    def test_content_md5(self):
        """A supplied MD5 digest is sent as Content-MD5."""
        _, headers = build_upload_part(_upload_part(md5_digest="bWQ1"))
        assert headers[h.CONTENT_MD5] == "bWQ1"

    def test_missing_stream(self):
        """A missing input stream is a usage error, not a network error."""
        with pytest.raises(MissingArgument) as exc_info:
            build_upload_part(_upload_part(input_stream=None))
        assert exc_info.value.name == "input_stream"

    @pytest.mark.parametrize("value", [1, 10000])
    def test_part_number_bounds_accepted(self, value):
        """Part numbers 1 and 10000 are accepted."""
        params, _ = build_upload_part(_upload_part(part_number=value))
        assert params["partNumber"] == str(value)

    @pytest.mark.parametrize("value", [0, -1, 10001])
    def test_part_number_out_of_range(self, value):
        """Part numbers outside (0, 10000] raise a range error."""
        with pytest.raises(RangeError) as exc_info:
            build_upload_part(_upload_part(part_number=value))
        assert exc_info.value.name == "part_number"

    @pytest.mark.parametrize("value", [0, DEFAULT_FILE_SIZE_LIMIT])
    def test_part_size_bounds_accepted(self, value):
        """Part sizes 0 and the file size limit are accepted."""
        _, headers = build_upload_part(_upload_part(part_size=value))
        assert headers[h.CONTENT_LENGTH] == str(value)

    @pytest.mark.parametrize("value", [-1, DEFAULT_FILE_SIZE_LIMIT + 1])
    def test_part_size_out_of_range(self, value):
        """Negative sizes and sizes above the limit raise a range error."""
        with pytest.raises(RangeError) as exc_info:
            build_upload_part(_upload_part(part_size=value))
        assert exc_info.value.name == "part_size"

    def test_default_part_size_rejected(self):
        """Leaving part_size unset without chunked encoding is rejected."""
        request = UploadPartRequest("bucket", "key", "u1", 1, input_stream=io.BytesIO(b""))
        with pytest.raises(RangeError):
            build_upload_part(request)


class TestUploadPartCopy:
    """Tests for build_upload_part_copy()."""

    def test_parameter_order(self):
        """partNumber comes before uploadId."""
        params, _ = build_upload_part_copy(_copy_part(part_number=2))
        assert list(params) == ["partNumber", "uploadId"]

    @pytest.mark.parametrize("field", ["source_bucket_name", "source_key"])
    def test_missing_source_names_field(self, field):
        """A missing source bucket or key is reported under its own name."""
        with pytest.raises(MissingArgument) as exc_info:
            build_upload_part_copy(_copy_part(**{field: None}))
        assert exc_info.value.name == field

    def test_copy_source_encoded(self):
        """The copy source is /bucket/url-encoded-key."""
        _, headers = build_upload_part_copy(_copy_part(source_key="dir/a b.txt"))
        assert headers[h.COPY_OBJECT_SOURCE] == "/src-bucket/dir%2Fa%20b.txt"

    def test_range_with_begin_and_size(self):
        """The range header is emitted when both begin index and size are set."""
        _, headers = build_upload_part_copy(_copy_part(begin_index=100, part_size=50))
        assert headers[h.COPY_SOURCE_RANGE] == "bytes=100-149"
        assert headers[h.CONTENT_LENGTH] == "50"

    def test_no_range_without_size(self):
        """No range header when only the begin index is set."""
        _, headers = build_upload_part_copy(_copy_part(begin_index=100))
        assert h.COPY_SOURCE_RANGE not in headers
        assert h.CONTENT_LENGTH not in headers

    def test_no_range_without_begin(self):
        """No range header when only the size is set."""
        _, headers = build_upload_part_copy(_copy_part(part_size=50))
        assert h.COPY_SOURCE_RANGE not in headers
        assert headers[h.CONTENT_LENGTH] == "50"

    def test_conditional_headers(self):
        """Date constraints are HTTP dates and ETag lists are comma-joined."""
        when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        _, headers = build_upload_part_copy(
            _copy_part(
                matching_etag_constraints=["a", "b"],
                nonmatching_etag_constraints=["c"],
                modified_since_constraint=when,
                unmodified_since_constraint=when,
            )
        )
        assert headers[h.COPY_OBJECT_SOURCE_IF_MATCH] == "a, b"
        assert headers[h.COPY_OBJECT_SOURCE_IF_NONE_MATCH] == "c"
        assert headers[h.COPY_OBJECT_SOURCE_IF_MODIFIED_SINCE] == "Tue, 02 Jan 2024 03:04:05 GMT"
        assert headers[h.COPY_OBJECT_SOURCE_IF_UNMODIFIED_SINCE] == (
            "Tue, 02 Jan 2024 03:04:05 GMT"
        )

    def test_no_conditional_headers_by_default(self):
        """Constraint headers are only sent when supplied."""
        _, headers = build_upload_part_copy(_copy_part())
        assert set(headers) == {h.COPY_OBJECT_SOURCE}

    def test_part_size_out_of_range(self):
        """A copy size above the file size limit raises a range error."""
        with pytest.raises(RangeError):
            build_upload_part_copy(_copy_part(part_size=DEFAULT_FILE_SIZE_LIMIT + 1))

    def test_part_number_out_of_range(self):
        """Copy part numbers are checked like upload part numbers."""
        with pytest.raises(RangeError):
            build_upload_part_copy(_copy_part(part_number=0))

    def test_invalid_source_bucket(self):
        """The source bucket name is validated."""
        with pytest.raises(InvalidBucketName):
            build_upload_part_copy(_copy_part(source_bucket_name="NO"))


class TestHeaderHelpers:
    """Tests for the header helper functions."""

    def test_add_string_list_header_empty(self):
        """An empty list adds nothing."""
        headers = {}
        add_string_list_header(headers, "x-test", [])
        assert headers == {}

    def test_remove_header_case_insensitive(self):
        """remove_header drops every casing of the name."""
        headers = {"Content-Length": "1", "content-length": "2", "ETag": "x"}
        remove_header(headers, "CONTENT-LENGTH")
        assert headers == {"ETag": "x"}
