"""Logging setup for ossclient callers and the ossclient CLI.

The library itself only creates module loggers. ``operation.do_operation``
attaches the request context to each record as ``extra`` fields, which the
JSON formatter below lifts into the output object.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Per-request context set by the dispatcher.
_CONTEXT_FIELDS = ("operation", "bucket", "key", "status", "duration_ms", "request_id")

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Renders a record as one JSON object per line.

    The object always has ``timestamp``, ``level``, ``logger`` and
    ``message``. Dispatcher records add the operation name, the target bucket
    and key, and, once a response arrived, its status, duration and service
    request id. Context fields that are unset are left out.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Install a single stderr handler on the root logger.

    Called by the CLI after the configuration is loaded; library users that
    manage logging themselves never need it. Existing root handlers are
    replaced so repeated calls do not duplicate output.

    Args:
        level: Level name from ``observability.log_level``. Unknown names
            fall back to INFO.
        fmt: ``"json"`` for one JSONFormatter object per line, anything else
            for plain text.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric_level)
