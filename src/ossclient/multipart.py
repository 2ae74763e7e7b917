"""Multipart upload operations for ossclient.

Implements the client side of the multipart protocol:
    - InitiateMultipartUpload (POST /{bucket}/{key}?uploads)
    - UploadPart (PUT /{bucket}/{key}?partNumber&uploadId)
    - UploadPartCopy (PUT /{bucket}/{key}?partNumber&uploadId + x-oss-copy-source)
    - CompleteMultipartUpload (POST /{bucket}/{key}?uploadId)
    - AbortMultipartUpload (DELETE /{bucket}/{key}?uploadId)
    - ListMultipartUploads (GET /{bucket}?uploads)
    - ListParts (GET /{bucket}/{key}?uploadId)

Every operation validates its request before anything is sent, so a
``UsageError`` never costs a round trip.
"""

import logging

from ossclient.builders import (
    build_abort_multipart_upload,
    build_complete_multipart_upload,
    build_initiate_multipart_upload,
    build_list_multipart_uploads,
    build_list_parts,
    build_upload_part,
    build_upload_part_copy,
)
from ossclient.comm import HttpMethod, RequestBody, RequestMessage, assemble_request
from ossclient.models import (
    AbortMultipartUploadRequest,
    CompleteMultipartUploadRequest,
    CompleteMultipartUploadResult,
    InitiateMultipartUploadRequest,
    InitiateMultipartUploadResult,
    ListMultipartUploadsRequest,
    ListPartsRequest,
    MultipartUploadListing,
    PartListing,
    UploadPartCopyRequest,
    UploadPartCopyResult,
    UploadPartRequest,
    UploadPartResult,
)
from ossclient.operation import ClientContext, do_operation
from ossclient.parsers import (
    UploadPartCopyResponseParser,
    UploadPartResponseParser,
    parse_complete_multipart_upload,
    parse_empty_response,
    parse_initiate_multipart_upload,
    parse_list_multipart_uploads,
    parse_list_parts,
)
from ossclient.xml_utils import render_complete_multipart_upload

logger = logging.getLogger(__name__)


class MultipartOperation:
    """Runs multipart upload operations against one service endpoint.

    Attributes:
        context: Endpoint, transport and credentials shared by all calls.
    """

    def __init__(self, context: ClientContext) -> None:
        self.context = context

    def _request(
        self,
        method: HttpMethod,
        bucket: str,
        key: str | None,
        parameters,
        headers,
        body: RequestBody | None = None,
    ) -> RequestMessage:
        return assemble_request(
            endpoint=self.context.endpoint,
            method=method,
            bucket=bucket,
            key=key,
            parameters=parameters,
            headers=headers,
            body=body,
            path_style=self.context.path_style,
        )

    def abort_multipart_upload(self, request: AbortMultipartUploadRequest) -> None:
        """Abort an upload session and discard its parts.

        Implements: DELETE /{bucket}/{key}?uploadId
        """
        params, headers = build_abort_multipart_upload(request)
        message = self._request(HttpMethod.DELETE, request.bucket_name, request.key, params, headers)
        do_operation(self.context, message, parse_empty_response, "AbortMultipartUpload")

    def complete_multipart_upload(
        self, request: CompleteMultipartUploadRequest
    ) -> CompleteMultipartUploadResult:
        """Assemble the listed parts into the final object.

        Implements: POST /{bucket}/{key}?uploadId

        The parts are sent in the order they appear in ``request.part_etags``.
        """
        params, headers = build_complete_multipart_upload(request)
        payload = render_complete_multipart_upload(request.part_etags).encode("utf-8")
        message = self._request(
            HttpMethod.POST,
            request.bucket_name,
            request.key,
            params,
            headers,
            RequestBody.of_bytes(payload),
        )
        return do_operation(
            self.context, message, parse_complete_multipart_upload, "CompleteMultipartUpload"
        )

    def initiate_multipart_upload(
        self, request: InitiateMultipartUploadRequest
    ) -> InitiateMultipartUploadResult:
        """Start a new upload session.

        Implements: POST /{bucket}/{key}?uploads

        The request is sent with an explicit zero-length body.
        """
        params, headers = build_initiate_multipart_upload(request)
        message = self._request(
            HttpMethod.POST,
            request.bucket_name,
            request.key,
            params,
            headers,
            RequestBody.empty(),
        )
        result = do_operation(
            self.context, message, parse_initiate_multipart_upload, "InitiateMultipartUpload"
        )
        logger.info(
            "Initiated multipart upload %s for %s/%s",
            result.upload_id,
            request.bucket_name,
            request.key,
        )
        return result

    def list_multipart_uploads(
        self, request: ListMultipartUploadsRequest
    ) -> MultipartUploadListing:
        """List in-progress upload sessions in a bucket.

        Implements: GET /{bucket}?uploads
        """
        params, headers = build_list_multipart_uploads(request)
        message = self._request(HttpMethod.GET, request.bucket_name, None, params, headers)
        return do_operation(
            self.context, message, parse_list_multipart_uploads, "ListMultipartUploads"
        )

    def list_parts(self, request: ListPartsRequest) -> PartListing:
        """List the parts uploaded so far for one session.

        Implements: GET /{bucket}/{key}?uploadId
        """
        params, headers = build_list_parts(request)
        message = self._request(HttpMethod.GET, request.bucket_name, request.key, params, headers)
        return do_operation(self.context, message, parse_list_parts, "ListParts")

    def upload_part(self, request: UploadPartRequest) -> UploadPartResult:
        """Upload one part from ``request.input_stream``.

        Implements: PUT /{bucket}/{key}?partNumber&uploadId
        """
        params, headers = build_upload_part(request)
        if request.use_chunk_encoding:
            limit = request.part_size if request.part_size >= 0 else None
            body = RequestBody.of_chunked_stream(request.input_stream, limit)
        else:
            body = RequestBody.of_stream(request.input_stream, request.part_size)
        message = self._request(
            HttpMethod.PUT, request.bucket_name, request.key, params, headers, body
        )
        return do_operation(
            self.context, message, UploadPartResponseParser(request.part_number), "UploadPart"
        )

    def upload_part_copy(self, request: UploadPartCopyRequest) -> UploadPartCopyResult:
        """Upload one part by copying a range of an existing object.

        Implements: PUT /{bucket}/{key}?partNumber&uploadId with x-oss-copy-source
        """
        params, headers = build_upload_part_copy(request)
        message = self._request(HttpMethod.PUT, request.bucket_name, request.key, params, headers)
        return do_operation(
            self.context,
            message,
            UploadPartCopyResponseParser(request.part_number),
            "UploadPartCopy",
        )
