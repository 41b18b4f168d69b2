"""Metrics hook protocol and no-op default implementation.

docxify emits counters, timings and a gauge at key points of a
conversion.  By default a :class:`NoopMetricsHook` is used so there is
zero overhead.  Users can supply any object satisfying :class:`MetricsHook` through
``DocxifyConfig(metrics=...)``.

Emitted metric names:

* ``docxify.blocks_created_total``       -- counter
* ``docxify.images_embedded_total``      -- counter
* ``docxify.images_fallback_total``      -- counter
* ``docxify.conversion_warnings_total``  -- counter
* ``docxify.conversion_duration_ms``     -- timing
* ``docxify.encode_duration_ms``         -- timing
* ``docxify.document_size_bytes``       -- gauge
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict whose keys and values are
    strings.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
