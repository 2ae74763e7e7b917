"""High-level client facade for ossclient."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ossclient.auth import Credentials, StaticCredentialsProvider, SigV4Signer
from ossclient.comm import Transport
from ossclient.config import ClientConfig
from ossclient.builders import MAX_PART_NUMBER, check_part_size
from ossclient.errors import OSSError, RangeError, UsageError
from ossclient.messages import get_message
from ossclient.metrics import init_metrics
from ossclient.models import (
    AbortMultipartUploadRequest,
    CompleteMultipartUploadRequest,
    CompleteMultipartUploadResult,
    InitiateMultipartUploadRequest,
    InitiateMultipartUploadResult,
    ListMultipartUploadsRequest,
    ListPartsRequest,
    MultipartUploadListing,
    ObjectMetadata,
    PartETag,
    PartListing,
    UploadPartCopyRequest,
    UploadPartCopyResult,
    UploadPartRequest,
    UploadPartResult,
)
from ossclient.multipart import MultipartOperation
from ossclient.operation import ClientContext
from ossclient.transport import HttpxTransport

logger = logging.getLogger(__name__)

DEFAULT_PART_SIZE = 8 * 1024 * 1024


class OSSClient:
    """Client for the multipart upload API of an S3-compatible service.

    The client owns its transport unless one is passed in. Use it as a
    context manager, or call ``close()`` when done.

    Attributes:
        config: The configuration the client was built from.
        multipart: The underlying operation dispatcher.
    """

    def __init__(self, config: ClientConfig | None = None, transport: Transport | None = None) -> None:
        self.config = config or ClientConfig()
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(
            timeout=self.config.http.timeout,
            user_agent=self.config.http.user_agent,
        )

        if self.config.observability.metrics:
            init_metrics()

        auth = self.config.auth
        provider = None
        signer = None
        if auth.access_key:
            provider = StaticCredentialsProvider(
                Credentials(auth.access_key, auth.secret_key, auth.security_token)
            )
            signer = SigV4Signer(region=self.config.endpoint.region)
        else:
            logger.info("No access key configured; requests will be sent unsigned")

        context = ClientContext(
            endpoint=self.config.endpoint.url,
            transport=self._transport,
            credentials_provider=provider,
            signer=signer,
            path_style=self.config.endpoint.path_style,
        )
        self.multipart = MultipartOperation(context)

    # -- Lifecycle -------------------------------------------------------------

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> OSSClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- Operations ------------------------------------------------------------

    def initiate_multipart_upload(
        self, request: InitiateMultipartUploadRequest
    ) -> InitiateMultipartUploadResult:
        return self.multipart.initiate_multipart_upload(request)

    def upload_part(self, request: UploadPartRequest) -> UploadPartResult:
        return self.multipart.upload_part(request)

    def upload_part_copy(self, request: UploadPartCopyRequest) -> UploadPartCopyResult:
        return self.multipart.upload_part_copy(request)

    def complete_multipart_upload(
        self, request: CompleteMultipartUploadRequest
    ) -> CompleteMultipartUploadResult:
        return self.multipart.complete_multipart_upload(request)

    def abort_multipart_upload(self, request: AbortMultipartUploadRequest) -> None:
        self.multipart.abort_multipart_upload(request)

    def list_multipart_uploads(
        self, request: ListMultipartUploadsRequest
    ) -> MultipartUploadListing:
        return self.multipart.list_multipart_uploads(request)

    def list_parts(self, request: ListPartsRequest) -> PartListing:
        return self.multipart.list_parts(request)

    # -- Convenience -----------------------------------------------------------

    def upload_file(
        self,
        bucket: str,
        key: str,
        path: str | Path,
        part_size: int = DEFAULT_PART_SIZE,
        metadata: ObjectMetadata | None = None,
    ) -> CompleteMultipartUploadResult:
        """Upload a local file as a multipart upload.

        Initiates a session, uploads the file in ``part_size`` slices and
        completes the upload. The part size and the resulting part count are
        checked before the session is created. If anything fails after that,
        the session is aborted and the original error re-raised.

        Args:
            bucket: Target bucket.
            key: Target object key.
            path: Local file to upload.
            part_size: Size of each part in bytes; the last part may be smaller.
            metadata: Optional object metadata sent with the initiate request.

        Returns:
            The CompleteMultipartUploadResult for the assembled object.
        """
        if part_size <= 0:
            raise UsageError(f"part_size must be positive, got {part_size}")
        check_part_size(part_size)

        file_size = os.path.getsize(path)
        part_count = max(1, -(-file_size // part_size))
        if part_count > MAX_PART_NUMBER:
            raise RangeError(
                "part_count",
                part_count,
                MAX_PART_NUMBER,
                get_message("PartCountOutOfRange", file_size, part_size, MAX_PART_NUMBER),
            )

        initiated = self.initiate_multipart_upload(
            InitiateMultipartUploadRequest(bucket, key, object_metadata=metadata)
        )
        upload_id = initiated.upload_id

        try:
            part_etags: list[PartETag] = []
            with open(path, "rb") as fh:
                offset = 0
                part_number = 1
                # An empty file still needs one (empty) part.
                while offset < file_size or part_number == 1:
                    size = min(part_size, file_size - offset)
                    fh.seek(offset)
                    result = self.upload_part(
                        UploadPartRequest(
                            bucket_name=bucket,
                            key=key,
                            upload_id=upload_id,
                            part_number=part_number,
                            input_stream=fh,
                            part_size=size,
                        )
                    )
                    part_etags.append(result.part_etag)
                    logger.debug("Uploaded part %d (%d bytes) of %s", part_number, size, key)
                    offset += size
                    part_number += 1

            return self.complete_multipart_upload(
                CompleteMultipartUploadRequest(bucket, key, upload_id, part_etags=part_etags)
            )
        except (OSError, OSSError):
            logger.warning("Upload of %s/%s failed; aborting upload %s", bucket, key, upload_id)
            try:
                self.abort_multipart_upload(AbortMultipartUploadRequest(bucket, key, upload_id))
            except OSSError as abort_exc:
                logger.error("Failed to abort upload %s: %s", upload_id, abort_exc)
            raise
