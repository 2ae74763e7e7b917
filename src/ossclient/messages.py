"""User-facing message table for argument validation errors."""

_MESSAGES: dict[str, str] = {
    "MustSetContentStream": "The content stream of the part must be set.",
    "PartNumberOutOfRange": "The part number must be in the range (0, {0}].",
    "FileSizeOutOfRange": "The part size must be in the range [0, {0}] bytes.",
    "MaxUploadsOutOfRange": "The max uploads must be in the range (0, {0}].",
    "MaxPartsOutOfRange": "The max parts must be in the range (0, {0}].",
    "PartNumberMarkerOutOfRange": "The part number marker must be in the range [0, {0}].",
    "PartCountOutOfRange": (
        "A {0}-byte file split into {1}-byte parts needs more than {2} parts."
    ),
    "ParameterIsNull": "The parameter '{0}' must not be null.",
    "ParameterStringIsEmpty": "The parameter '{0}' must not be null or empty.",
    "UnsupportedAcl": "Unsupported acl type, please specify one of {0}.",
}


def get_message(key: str, *args: object) -> str:
    """Return the message registered under ``key`` formatted with ``args``.

    Raises:
        KeyError: If no message is registered under ``key``.
    """
    return _MESSAGES[key].format(*args)
