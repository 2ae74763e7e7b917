"""Small encoding helpers shared by the builders, signer and transport."""

import email.utils
import urllib.parse
from datetime import datetime, timezone


def uri_encode(s: str, encode_slash: bool = True) -> str:
    """S3-compatible URI encoding.

    Characters A-Z, a-z, 0-9, '-', '_', '.', '~' are not encoded.
    All other characters are percent-encoded with uppercase hex.
    Spaces become %20 (not +).

    Args:
        s: The string to encode.
        encode_slash: If True (default), '/' is encoded as %2F.
                     If False, '/' is left as-is.

    Returns:
        The URI-encoded string.
    """
    safe = "-_.~" if encode_slash else "-_.~/"
    return urllib.parse.quote(s, safe=safe)


def uri_encode_path(path: str) -> str:
    """URI-encode a path, preserving forward slashes.

    Args:
        path: The URI path to encode.

    Returns:
        The URI-encoded path, always starting with '/'.
    """
    if not path:
        return "/"
    segments = path.split("/")
    result = "/".join(uri_encode(seg, encode_slash=False) for seg in segments)
    if not result.startswith("/"):
        result = "/" + result
    return result


def format_http_date(dt: datetime) -> str:
    """Format a datetime as an RFC 7231 HTTP date.

    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return email.utils.format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def trim_quotes(value: str) -> str:
    """Strip surrounding double quotes from an ETag value."""
    return value.strip('"')
