"""
Metric Instruments - Thread-Safe Counters, Gauges, Histograms, Meters, Timers.

Instruments are updated by application threads and read by the
reporter through ``snapshot()``. Each instrument guards its own state
with a lock; snapshots are immutable copies.

Design Notes:
    - Histogram keeps a uniform reservoir sample (Vitter's algorithm R)
    - Meter rates are exponentially weighted moving averages ticked
      every 5 seconds, lazily on update or read
    - Timer durations are recorded in seconds
"""

from __future__ import annotations

import math
import random
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from metrics_clickhouse.metrics.snapshots import (
    CounterSnapshot,
    GaugeFloat64Snapshot,
    GaugeSnapshot,
    HistogramSnapshot,
    MeterSnapshot,
    TimerSnapshot,
)

DEFAULT_RESERVOIR_SIZE = 1028
TICK_INTERVAL_SECONDS = 5.0


class Counter:
    """Monotonic or up/down integer count."""

    def __init__(self) -> None:
        self._count = 0
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    def clear(self) -> None:
        with self._lock:
            self._count = 0

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def snapshot(self) -> CounterSnapshot:
        return CounterSnapshot(count=self.count)


class Gauge:
    """Last observed integer value."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def update(self, value: int) -> None:
        with self._lock:
            self._value = int(value)

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def snapshot(self) -> GaugeSnapshot:
        return GaugeSnapshot(value=self.value)


class GaugeFloat64:
    """Last observed float value."""

    def __init__(self) -> None:
        self._value = 0.0
        self._lock = threading.Lock()

    def update(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def snapshot(self) -> GaugeFloat64Snapshot:
        return GaugeFloat64Snapshot(value=self.value)


class UniformSample:
    """Fixed-size uniform reservoir sample."""

    def __init__(
        self,
        reservoir_size: int = DEFAULT_RESERVOIR_SIZE,
        rng: Optional[random.Random] = None,
    ) -> None:
        if reservoir_size <= 0:
            raise ValueError(f"reservoir_size must be positive, got {reservoir_size}")
        self.reservoir_size = reservoir_size
        self._rng = rng or random.Random()
        self._values: List[float] = []
        self._count = 0

    def update(self, value: float) -> None:
        self._count += 1
        if len(self._values) < self.reservoir_size:
            self._values.append(value)
            return
        slot = self._rng.randrange(self._count)
        if slot < self.reservoir_size:
            self._values[slot] = value

    def clear(self) -> None:
        self._values = []
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def values(self) -> List[float]:
        return list(self._values)


class Histogram:
    """Distribution of values backed by a reservoir sample."""

    def __init__(self, sample: Optional[UniformSample] = None) -> None:
        self._sample = sample or UniformSample()
        self._lock = threading.Lock()

    def update(self, value: float) -> None:
        with self._lock:
            self._sample.update(value)

    def clear(self) -> None:
        with self._lock:
            self._sample.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return self._sample.count

    def snapshot(self) -> HistogramSnapshot:
        with self._lock:
            return HistogramSnapshot(
                count=self._sample.count,
                values=tuple(self._sample.values),
            )


class EWMA:
    """Exponentially weighted moving average of a per-second rate."""

    def __init__(self, minutes: float) -> None:
        self.alpha = 1.0 - math.exp(-TICK_INTERVAL_SECONDS / 60.0 / minutes)
        self._uncounted = 0
        self._rate = 0.0
        self._initialized = False

    def update(self, n: int) -> None:
        self._uncounted += n

    def tick(self) -> None:
        instant_rate = self._uncounted / TICK_INTERVAL_SECONDS
        self._uncounted = 0
        if self._initialized:
            self._rate += self.alpha * (instant_rate - self._rate)
        else:
            self._rate = instant_rate
            self._initialized = True

    @property
    def rate(self) -> float:
        return self._rate


class Meter:
    """Event count with 1, 5 and 15 minute moving rates and a mean rate."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._start = clock()
        self._last_tick = self._start
        self._m1 = EWMA(1)
        self._m5 = EWMA(5)
        self._m15 = EWMA(15)

    def mark(self, n: int = 1) -> None:
        with self._lock:
            self._tick_if_necessary()
            self._count += n
            self._m1.update(n)
            self._m5.update(n)
            self._m15.update(n)

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def snapshot(self) -> MeterSnapshot:
        with self._lock:
            self._tick_if_necessary()
            return MeterSnapshot(
                count=self._count,
                rate1=self._m1.rate,
                rate5=self._m5.rate,
                rate15=self._m15.rate,
                rate_mean=self._mean_rate(),
            )

    def _mean_rate(self) -> float:
        if self._count == 0:
            return 0.0
        elapsed = self._clock() - self._start
        if elapsed <= 0:
            return 0.0
        return self._count / elapsed

    def _tick_if_necessary(self) -> None:
        elapsed = self._clock() - self._last_tick
        ticks = int(elapsed // TICK_INTERVAL_SECONDS)
        if ticks <= 0:
            return
        self._last_tick += ticks * TICK_INTERVAL_SECONDS
        for _ in range(ticks):
            self._m1.tick()
            self._m5.tick()
            self._m15.tick()


class Timer:
    """Histogram of durations (seconds) combined with a meter of events."""

    def __init__(
        self,
        histogram: Optional[Histogram] = None,
        meter: Optional[Meter] = None,
    ) -> None:
        self._histogram = histogram or Histogram()
        self._meter = meter or Meter()
        # Guards histogram and meter together; snapshots see one event set
        self._lock = threading.Lock()

    def update(self, duration_seconds: float) -> None:
        with self._lock:
            self._histogram.update(duration_seconds)
            self._meter.mark(1)

    def update_since(self, start: float) -> None:
        """Record the time elapsed since a ``time.perf_counter()`` value."""
        self.update(time.perf_counter() - start)

    @contextmanager
    def time(self) -> Iterator[None]:
        """Time the enclosed block."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.update_since(start)

    @property
    def count(self) -> int:
        return self._histogram.count

    def snapshot(self) -> TimerSnapshot:
        with self._lock:
            hist = self._histogram.snapshot()
            meter = self._meter.snapshot()
        return TimerSnapshot(
            count=hist.count,
            values=hist.values,
            rate1=meter.rate1,
            rate5=meter.rate5,
            rate15=meter.rate15,
            rate_mean=meter.rate_mean,
        )
