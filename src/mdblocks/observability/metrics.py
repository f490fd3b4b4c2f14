"""Metrics hook protocol and no-op default implementation.

mdblocks emits counters and timings around each decomposition.  By default
a :class:`NoopMetricsHook` discards them; pass any object satisfying
:class:`MetricsHook` as ``MdBlocksConfig.metrics`` to route them to
StatsD, Prometheus or similar.

Emitted metric names:

* ``mdblocks.blocks_emitted_total``      -- counter
* ``mdblocks.code_groups_total``         -- counter
* ``mdblocks.highlight_fallback_total``  -- counter
* ``mdblocks.worker_failures_total``     -- counter
* ``mdblocks.convert_duration_ms``       -- timing
* ``mdblocks.async_duration_ms``         -- timing
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
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
    """Metrics implementation that silently discards all data points."""

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


def resolve_metrics(metrics: Any | None) -> MetricsHook:
    """Return *metrics*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return metrics if metrics is not None else NoopMetricsHook()
