"""
Metrics Registry - Named Collection of Instruments.

Thread-safe mapping from metric name to instrument. Application code
registers and updates instruments; the reporter enumerates them with
``each()``.

Usage:
    registry = MetricsRegistry()
    requests = registry.counter("http.requests")
    requests.inc()

    with registry.timer("db.query").time():
        run_query()
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from metrics_clickhouse.metrics.instruments import (
    Counter,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    Timer,
)

logger = logging.getLogger(__name__)

M = TypeVar("M")


class DuplicateMetricError(ValueError):
    """Raised when registering a name that is already taken."""
    pass


class MetricsRegistry:
    """
    Thread-safe registry of named metrics.

    Supports:
        - Explicit registration (fails on duplicates)
        - get_or_register with an instance or a factory
        - Typed helpers for the bundled instruments
        - Enumeration over a point-in-time copy of the registrations
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._metrics: Dict[str, Any] = {}
        self._lock = RLock()

    def register(self, name: str, metric: Any) -> None:
        """
        Register a metric under a name.

        Raises:
            DuplicateMetricError: If the name is already registered
        """
        with self._lock:
            if name in self._metrics:
                raise DuplicateMetricError(f"Metric '{name}' is already registered")
            self._metrics[name] = metric
            logger.debug(f"Registered metric: {name} ({type(metric).__name__})")

    def get(self, name: str) -> Optional[Any]:
        """Get a metric by name, or None."""
        with self._lock:
            return self._metrics.get(name)

    def get_or_register(
        self,
        name: str,
        metric_or_factory: Union[Any, Callable[[], Any]],
    ) -> Any:
        """
        Get an existing metric or register a new one.

        Args:
            name: Metric name
            metric_or_factory: Instance to register, or a zero-argument
                callable (such as an instrument class) creating one

        Returns:
            The registered metric
        """
        with self._lock:
            existing = self._metrics.get(name)
            if existing is not None:
                return existing
            metric = _instantiate(metric_or_factory)
            self._metrics[name] = metric
            logger.debug(f"Registered metric: {name} ({type(metric).__name__})")
            return metric

    def unregister(self, name: str) -> bool:
        """
        Remove a metric by name.

        Returns:
            True if the metric was removed, False if not found
        """
        with self._lock:
            if name not in self._metrics:
                return False
            del self._metrics[name]
            logger.debug(f"Unregistered metric: {name}")
            return True

    def unregister_all(self) -> None:
        """Remove every metric."""
        with self._lock:
            self._metrics.clear()

    def each(self, callback: Callable[[str, Any], None]) -> None:
        """
        Invoke callback for every registered (name, metric) pair.

        Iterates over a copy taken under the lock, so callbacks may run
        while other threads register or unregister metrics.
        """
        for name, metric in self._registered():
            callback(name, metric)

    def names(self) -> List[str]:
        """Names of all registered metrics."""
        with self._lock:
            return list(self._metrics)

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._metrics

    def counter(self, name: str) -> Counter:
        return self._typed(name, Counter)

    def gauge(self, name: str) -> Gauge:
        return self._typed(name, Gauge)

    def gauge_float64(self, name: str) -> GaugeFloat64:
        return self._typed(name, GaugeFloat64)

    def histogram(self, name: str) -> Histogram:
        return self._typed(name, Histogram)

    def meter(self, name: str) -> Meter:
        return self._typed(name, Meter)

    def timer(self, name: str) -> Timer:
        return self._typed(name, Timer)

    def _typed(self, name: str, metric_class: Type[M]) -> M:
        metric = self.get_or_register(name, metric_class)
        if not isinstance(metric, metric_class):
            raise DuplicateMetricError(
                f"Metric '{name}' is a {type(metric).__name__}, "
                f"not a {metric_class.__name__}"
            )
        return metric

    def _registered(self) -> List[Tuple[str, Any]]:
        with self._lock:
            return list(self._metrics.items())


def _instantiate(metric_or_factory: Union[Any, Callable[[], Any]]) -> Any:
    """Call classes and plain factories; pass instruments through."""
    if isinstance(metric_or_factory, type):
        return metric_or_factory()
    if callable(metric_or_factory) and not hasattr(metric_or_factory, "snapshot"):
        return metric_or_factory()
    return metric_or_factory
