"""Metrics hook protocol and no-op default implementation.

boardnotify emits counters and timings while converting and delivering
notifications.  By default a :class:`NoopMetricsHook` is used so there is
zero overhead.  Users can supply their own implementation that satisfies
the :class:`MetricsHook` protocol to route metrics to any backend.

Emitted metric names:

* ``boardnotify.attachments_total``        -- counter
* ``boardnotify.render_errors_total``      -- counter
* ``boardnotify.template_compiles_total``  -- counter
* ``boardnotify.mention_suppressed_total`` -- counter
* ``boardnotify.batch_duration_ms``        -- timing
* ``boardnotify.deliveries_total``         -- counter
* ``boardnotify.delivery_duration_ms``     -- timing
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
        """Record a timing / duration metric in milliseconds."""
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
    """Default metrics implementation that silently discards all data points.

    Used when the caller does not supply a backend, so metrics call-sites
    never need ``if self._metrics is not None`` guards.
    """

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
