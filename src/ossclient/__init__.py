"""ossclient - multipart upload client for S3-compatible object storage."""

__version__ = "0.1.0"

from ossclient.auth import Credentials, SigV4Signer, StaticCredentialsProvider  # noqa: E402
from ossclient.client import OSSClient  # noqa: E402
from ossclient.config import ClientConfig, load_config  # noqa: E402
from ossclient.errors import (  # noqa: E402
    ClientError,
    OSSError,
    ResponseParseError,
    ServiceError,
    UsageError,
)
from ossclient.models import (  # noqa: E402
    AbortMultipartUploadRequest,
    CannedAccessControlList,
    CompleteMultipartUploadRequest,
    CompleteMultipartUploadResult,
    InitiateMultipartUploadRequest,
    InitiateMultipartUploadResult,
    ListMultipartUploadsRequest,
    ListPartsRequest,
    MultipartUpload,
    MultipartUploadListing,
    ObjectMetadata,
    PartETag,
    PartListing,
    PartSummary,
    UploadPartCopyRequest,
    UploadPartCopyResult,
    UploadPartRequest,
    UploadPartResult,
)
from ossclient.multipart import MultipartOperation  # noqa: E402
from ossclient.operation import ClientContext  # noqa: E402
