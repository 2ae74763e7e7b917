"""Prometheus metrics definitions for ossclient.

All metrics use the ``ossclient_`` prefix. They are created by
``init_metrics()``; until then the module-level references stay ``None`` and
nothing is registered in the global ``prometheus_client`` registry, so
importing the client never has side effects on an application's metrics.
"""

from __future__ import annotations

from prometheus_client import Counter

# Flag indicating whether metrics have been initialised via init_metrics().
_initialized: bool = False

# ---------------------------------------------------------------------------
# Operation counter  (labels: operation, status)
# ---------------------------------------------------------------------------
operations_total: Counter | None = None

# ---------------------------------------------------------------------------
# Byte counters
# ---------------------------------------------------------------------------
bytes_sent_total: Counter | None = None


def init_metrics() -> None:
    """Create and register all Prometheus metrics. Safe to call repeatedly."""
    global _initialized
    global operations_total, bytes_sent_total

    if _initialized:
        return

    operations_total = Counter(
        "ossclient_operations_total",
        "Total multipart operations by type and outcome",
        ["operation", "status"],
    )

    bytes_sent_total = Counter(
        "ossclient_bytes_sent_total",
        "Total bytes declared in sized request bodies",
    )

    _initialized = True


def record_operation(operation: str, status: str) -> None:
    """Count one finished operation if metrics are enabled."""
    if operations_total is not None:
        operations_total.labels(operation=operation, status=status).inc()


def record_bytes_sent(size: int | None) -> None:
    if size and bytes_sent_total is not None:
        bytes_sent_total.inc(size)
