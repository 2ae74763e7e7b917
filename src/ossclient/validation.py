"""Input validation helpers for ossclient.

These functions enforce bucket/key naming rules and the generic presence and
range checks used by the request builders. They are pure: each returns
normally or raises a ``UsageError`` subclass, and none of them touch the
network.
"""

import re

from ossclient.errors import InvalidBucketName, InvalidObjectKey, MissingArgument
from ossclient.messages import get_message

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Bucket naming rules:
#   - 1-63 characters
#   - lowercase letters, digits and hyphens
#   - must start and end with a letter or digit

_BUCKET_RE = re.compile(r"^[a-z0-9](?:[a-z0-9\-]{0,61}[a-z0-9])?$")

_MAX_KEY_BYTES = 1023


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_bucket_name(name: str) -> None:
    """Validate a bucket name against the service naming rules.

    Args:
        name: The candidate bucket name.

    Raises:
        InvalidBucketName: If the name violates any bucket naming rule.
    """
    if not _BUCKET_RE.match(name):
        raise InvalidBucketName(name)


def validate_object_key(key: str) -> None:
    """Validate an object key.

    Keys must be 1-1023 bytes when UTF-8 encoded and must not start with a
    slash or backslash.

    Args:
        key: The object key string.

    Raises:
        InvalidObjectKey: If the key is empty, too long or badly prefixed.
    """
    encoded = key.encode("utf-8")
    if not encoded or len(encoded) > _MAX_KEY_BYTES:
        raise InvalidObjectKey(key)
    if key.startswith(("/", "\\")):
        raise InvalidObjectKey(key)


def assert_parameter_not_null(value: object, name: str) -> None:
    """Raise ``MissingArgument`` if ``value`` is None."""
    if value is None:
        raise MissingArgument(name, get_message("ParameterIsNull", name))


def assert_string_not_empty(value: str | None, name: str) -> None:
    """Raise ``MissingArgument`` if ``value`` is None or the empty string."""
    if not value:
        raise MissingArgument(name, get_message("ParameterStringIsEmpty", name))


def check_param_range(
    value: int,
    lower: int,
    lower_inclusive: bool,
    upper: int,
    upper_inclusive: bool,
) -> bool:
    """Return True when ``value`` lies within the given bounds."""
    if lower_inclusive:
        above = value >= lower
    else:
        above = value > lower
    if upper_inclusive:
        below = value <= upper
    else:
        below = value < upper
    return above and below


def ensure_bucket_and_key(
    bucket_name: str | None,
    key: str | None,
    bucket_arg: str = "bucket_name",
    key_arg: str = "key",
) -> None:
    """Check that bucket and key are present and well formed.

    ``bucket_arg`` and ``key_arg`` are the argument names reported when one
    of them is missing.
    """
    assert_parameter_not_null(bucket_name, bucket_arg)
    validate_bucket_name(bucket_name)
    assert_parameter_not_null(key, key_arg)
    validate_object_key(key)


def ensure_upload_target(bucket_name: str | None, key: str | None, upload_id: str | None) -> None:
    """Check the ``(bucket, key, upload_id)`` triple that names an upload."""
    ensure_bucket_and_key(bucket_name, key)
    assert_string_not_empty(upload_id, "upload_id")
