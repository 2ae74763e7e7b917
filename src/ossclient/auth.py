"""Credentials and AWS Signature Version 4 request signing for ossclient.

Signs ``RequestMessage`` descriptors with header-based SigV4 auth before
they are handed to the transport. The canonical query string is built from
the sorted parameters, so the signature does not depend on emission order;
the descriptor still carries parameters in their emission order for the
wire.

References:
    - https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-authenticating-requests.html
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import urllib.parse
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from ossclient import headers as h
from ossclient.comm import RequestMessage
from ossclient.utils import uri_encode, uri_encode_path

logger = logging.getLogger(__name__)

# Constants
ALGORITHM = "AWS4-HMAC-SHA256"
KEY_PREFIX = "AWS4"
SCOPE_TERMINATOR = "aws4_request"
SERVICE_NAME = "s3"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Headers always included in the signature when present, besides x-oss-*.
_SIGNED_STANDARD_HEADERS = frozenset({"host", "content-md5", "content-type"})


@dataclass(frozen=True)
class Credentials:
    """An access key pair, optionally with a temporary security token."""

    access_key_id: str
    secret_access_key: str
    security_token: str | None = None

    def __repr__(self) -> str:
        return f"Credentials(access_key_id={self.access_key_id!r}, secret_access_key='***')"


class CredentialsProvider(Protocol):
    def get_credentials(self) -> Credentials:
        ...


class StaticCredentialsProvider:
    """Returns the same credentials for every request."""

    def __init__(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def get_credentials(self) -> Credentials:
        return self._credentials


class RequestSigner(Protocol):
    def sign(self, request: RequestMessage, credentials: Credentials) -> RequestMessage:
        ...


class SigV4Signer:
    """Signs request descriptors with AWS Signature Version 4.

    Attributes:
        region: The region used in the credential scope.
        service: The service name used in the credential scope.
    """

    def __init__(self, region: str = "us-east-1", service: str = SERVICE_NAME) -> None:
        self.region = region
        self.service = service
        # Signing key cache: (access_key, date, region, service) -> signing_key bytes
        self._signing_key_cache: dict[tuple[str, str, str, str], bytes] = {}

    def sign(
        self,
        request: RequestMessage,
        credentials: Credentials,
        now: datetime | None = None,
    ) -> RequestMessage:
        """Return a copy of ``request`` carrying SigV4 authentication headers.

        Args:
            request: The unsigned request descriptor.
            credentials: The credentials to sign with.
            now: Signing time; defaults to the current UTC time.

        Returns:
            A new RequestMessage with Host, x-amz-date, x-amz-content-sha256,
            Authorization and, for temporary credentials, the security token
            header added.
        """
        now = now or datetime.now(timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        date_stamp = amz_date[:8]

        url = urllib.parse.urlsplit(request.url)

        if request.body is None or request.body.length == 0:
            payload_hash = EMPTY_SHA256
        else:
            payload_hash = UNSIGNED_PAYLOAD

        extra: dict[str, str] = {
            h.HOST: url.netloc,
            h.AMZ_DATE: amz_date,
            h.AMZ_CONTENT_SHA256: payload_hash,
        }
        if credentials.security_token:
            extra[h.OSS_SECURITY_TOKEN] = credentials.security_token

        all_headers = dict(request.headers)
        all_headers.update(extra)

        signed_headers = _select_signed_headers(all_headers)
        canonical_request = self._build_canonical_request(
            method=request.method.value,
            uri=urllib.parse.unquote(url.path),
            query_string=url.query,
            headers=all_headers,
            signed_headers=signed_headers,
            payload_hash=payload_hash,
        )

        scope = f"{date_stamp}/{self.region}/{self.service}/{SCOPE_TERMINATOR}"
        string_to_sign = self._build_string_to_sign(amz_date, scope, canonical_request)
        signing_key = self._derive_signing_key(
            credentials.secret_access_key,
            date_stamp,
            self.region,
            self.service,
            credentials.access_key_id,
        )
        signature = self._compute_signature(signing_key, string_to_sign)

        extra[h.AUTHORIZATION] = (
            f"{ALGORITHM} Credential={credentials.access_key_id}/{scope}, "
            f"SignedHeaders={';'.join(sorted(signed_headers))}, Signature={signature}"
        )
        logger.debug("Signed %s %s (scope=%s)", request.method.value, url.path, scope)
        return request.with_headers(extra)

    # -- Canonical request construction ----------------------------------------

    def _build_canonical_request(
        self,
        method: str,
        uri: str,
        query_string: str,
        headers: dict[str, str],
        signed_headers: list[str],
        payload_hash: str,
    ) -> str:
        """Build the canonical request string.

        Args:
            method: HTTP method (uppercase).
            uri: The decoded request URI path.
            query_string: The raw query string.
            headers: All request headers (names may be mixed case).
            signed_headers: List of signed header names (lowercase).
            payload_hash: SHA-256 hex digest or UNSIGNED-PAYLOAD.

        Returns:
            The canonical request string.
        """
        canonical_uri = uri_encode_path(uri)
        canonical_query = _build_canonical_query_string(query_string)

        # Canonical headers: lowercase names, trim values, sort by name
        lower_headers: dict[str, str] = {}
        for name, value in headers.items():
            lower_name = name.lower()
            if lower_name in lower_headers:
                lower_headers[lower_name] += "," + _trim_header_value(value)
            else:
                lower_headers[lower_name] = _trim_header_value(value)

        sorted_signed = sorted(signed_headers)
        canonical_headers = "".join(
            f"{name}:{lower_headers.get(name, '')}\n" for name in sorted_signed
        )

        parts = [
            method,
            canonical_uri,
            canonical_query,
            canonical_headers,
            ";".join(sorted_signed),
            payload_hash,
        ]
        return "\n".join(parts)

    # -- String to sign --------------------------------------------------------

    def _build_string_to_sign(self, timestamp: str, scope: str, canonical_request: str) -> str:
        canonical_hash = hashlib.sha256(canonical_request.encode("utf-8")).hexdigest()
        return f"{ALGORITHM}\n{timestamp}\n{scope}\n{canonical_hash}"

    # -- Signing key derivation ------------------------------------------------

    def _derive_signing_key(
        self,
        secret_key: str,
        date: str,
        region: str,
        service: str,
        access_key: str = "",
    ) -> bytes:
        """Derive the signing key, caching it per (access_key, date, region, service)."""
        cache_key = (access_key, date, region, service)
        cached = self._signing_key_cache.get(cache_key)
        if cached is not None:
            return cached

        signing_key = derive_signing_key(secret_key, date, region, service)

        if len(self._signing_key_cache) > 100:
            self._signing_key_cache.clear()
        self._signing_key_cache[cache_key] = signing_key

        return signing_key

    def _compute_signature(self, signing_key: bytes, string_to_sign: str) -> str:
        return hmac.new(signing_key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()


# ---------------------------------------------------------------------------
# Module-level utility functions
# ---------------------------------------------------------------------------


def derive_signing_key(secret_key: str, date: str, region: str, service: str) -> bytes:
    """Derive the SigV4 signing key via the HMAC-SHA256 chain.

    Args:
        secret_key: The secret access key.
        date: Date string (YYYYMMDD).
        region: Region name.
        service: Service name.

    Returns:
        The 32-byte signing key.
    """
    k_date = hmac.new(
        (KEY_PREFIX + secret_key).encode("utf-8"),
        date.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    k_region = hmac.new(k_date, region.encode("utf-8"), hashlib.sha256).digest()
    k_service = hmac.new(k_region, service.encode("utf-8"), hashlib.sha256).digest()
    return hmac.new(k_service, SCOPE_TERMINATOR.encode("utf-8"), hashlib.sha256).digest()


def _select_signed_headers(headers: dict[str, str]) -> list[str]:
    """Pick the lowercase header names that take part in the signature."""
    names = set()
    for name in headers:
        lower_name = name.lower()
        if (
            lower_name in _SIGNED_STANDARD_HEADERS
            or lower_name.startswith(h.OSS_PREFIX)
            or lower_name.startswith("x-amz-")
        ):
            names.add(lower_name)
    return sorted(names)


def _build_canonical_query_string(query_string: str) -> str:
    """Build the canonical query string from a raw query string.

    Parameters are sorted by name (byte-order), then by value. Parameters
    with no value use an empty value (e.g. 'uploads=').

    Args:
        query_string: The raw query string (without leading '?').

    Returns:
        The canonical query string.
    """
    if not query_string:
        return ""

    params: list[tuple[str, str]] = []
    for pair in query_string.split("&"):
        if not pair:
            continue
        if "=" in pair:
            name, value = pair.split("=", 1)
        else:
            name = pair
            value = ""
        params.append((urllib.parse.unquote(name), urllib.parse.unquote(value)))

    params.sort()

    return "&".join(
        f"{uri_encode(name, encode_slash=True)}={uri_encode(value, encode_slash=True)}"
        for name, value in params
    )


def _trim_header_value(value: str) -> str:
    """Strip surrounding whitespace and collapse runs of spaces."""
    return re.sub(r" +", " ", value.strip())
