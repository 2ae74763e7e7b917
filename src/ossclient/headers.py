"""HTTP header and query parameter names used by the multipart client."""

# -- Standard HTTP headers ----------------------------------------------------

AUTHORIZATION = "Authorization"
CACHE_CONTROL = "Cache-Control"
CONTENT_DISPOSITION = "Content-Disposition"
CONTENT_ENCODING = "Content-Encoding"
CONTENT_LENGTH = "Content-Length"
CONTENT_MD5 = "Content-MD5"
CONTENT_TYPE = "Content-Type"
DATE = "Date"
ETAG = "ETag"
EXPIRES = "Expires"
HOST = "Host"
USER_AGENT = "User-Agent"

# -- Service-specific headers -------------------------------------------------

OSS_PREFIX = "x-oss-"
OSS_USER_METADATA_PREFIX = "x-oss-meta-"

OSS_OBJECT_ACL = "x-oss-object-acl"
OSS_SECURITY_TOKEN = "x-oss-security-token"
OSS_REQUEST_ID = "x-oss-request-id"

COPY_OBJECT_SOURCE = "x-oss-copy-source"
COPY_SOURCE_RANGE = "x-oss-copy-source-range"
COPY_OBJECT_SOURCE_IF_MATCH = "x-oss-copy-source-if-match"
COPY_OBJECT_SOURCE_IF_NONE_MATCH = "x-oss-copy-source-if-none-match"
COPY_OBJECT_SOURCE_IF_UNMODIFIED_SINCE = "x-oss-copy-source-if-unmodified-since"
COPY_OBJECT_SOURCE_IF_MODIFIED_SINCE = "x-oss-copy-source-if-modified-since"

# Signature V4 headers
AMZ_DATE = "x-amz-date"
AMZ_CONTENT_SHA256 = "x-amz-content-sha256"

# Some deployments return the request id under this bare name.
REQUEST_ID_FALLBACK = "Request-ID"

# -- Query parameters ---------------------------------------------------------

SUBRESOURCE_UPLOADS = "uploads"
UPLOAD_ID = "uploadId"
PART_NUMBER = "partNumber"
MAX_UPLOADS = "max-uploads"
MAX_PARTS = "max-parts"
KEY_MARKER = "key-marker"
UPLOAD_ID_MARKER = "upload-id-marker"
PART_NUMBER_MARKER = "part-number-marker"
PREFIX = "prefix"
DELIMITER = "delimiter"
