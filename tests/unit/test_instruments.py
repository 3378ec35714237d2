"""
Unit Tests for Metric Instruments.

Test Aspects Covered:
    ✅ Business Logic: Counts, gauges, sample statistics, EWMA rates
    ✅ Edge Cases: Empty samples, reservoir overflow
    ✅ State: Snapshots are immutable copies
    ✅ Performance: Concurrent updates are not lost
"""

from __future__ import annotations

import math
import random
import threading
from dataclasses import FrozenInstanceError

import pytest

from metrics_clickhouse.metrics.instruments import (
    Counter,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    Timer,
    UniformSample,
)
from metrics_clickhouse.metrics.snapshots import MetricKind, sample_percentiles


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestCounter:
    """Test cases for Counter."""

    def test_inc_dec_clear(self) -> None:
        counter = Counter()
        counter.inc()
        counter.inc(4)
        counter.dec(2)
        assert counter.count == 3

        counter.clear()
        assert counter.count == 0

    def test_snapshot_is_frozen_copy(self) -> None:
        """
        SCENARIO: Snapshot taken, then counter updated
        EXPECTED: Snapshot keeps the old value and cannot be changed
        """
        counter = Counter()
        counter.inc(5)

        snapshot = counter.snapshot()
        counter.inc()

        assert snapshot.count == 5
        assert snapshot.kind == MetricKind.COUNTER
        with pytest.raises(FrozenInstanceError):
            snapshot.count = 1

    def test_concurrent_increments(self) -> None:
        """Increments from many threads are all counted."""
        counter = Counter()

        def work() -> None:
            for _ in range(1000):
                counter.inc()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert counter.count == 8000


class TestGauges:
    """Test cases for Gauge and GaugeFloat64."""

    def test_gauge_keeps_last_value(self) -> None:
        gauge = Gauge()
        gauge.update(3)
        gauge.update(9)
        assert gauge.snapshot().value == 9
        assert gauge.snapshot().kind == MetricKind.GAUGE

    def test_float_gauge(self) -> None:
        gauge = GaugeFloat64()
        gauge.update(0.36)
        assert gauge.snapshot().value == 0.36
        assert gauge.snapshot().kind == MetricKind.GAUGE_FLOAT64


class TestHistogram:
    """Test cases for Histogram and UniformSample."""

    def test_statistics(self) -> None:
        histogram = Histogram()
        for v in (2, 4, 4, 4, 5, 5, 7, 9):
            histogram.update(v)

        snapshot = histogram.snapshot()

        assert snapshot.count == 8
        assert snapshot.min == 2
        assert snapshot.max == 9
        assert snapshot.mean == 5.0
        assert snapshot.variance == 4.0
        assert snapshot.stddev == 2.0

    def test_empty_statistics(self) -> None:
        snapshot = Histogram().snapshot()

        assert snapshot.count == 0
        assert snapshot.mean == 0.0
        assert snapshot.percentiles([0.5, 0.99]) == [0.0, 0.0]

    def test_reservoir_is_bounded(self) -> None:
        """
        SCENARIO: More updates than the reservoir holds
        EXPECTED: Count tracks all updates, sample stays at reservoir size
        """
        sample = UniformSample(reservoir_size=10, rng=random.Random(1))
        histogram = Histogram(sample)

        for v in range(1000):
            histogram.update(v)

        snapshot = histogram.snapshot()
        assert snapshot.count == 1000
        assert len(snapshot.values) == 10
        assert all(0 <= v < 1000 for v in snapshot.values)

    def test_invalid_reservoir_size(self) -> None:
        with pytest.raises(ValueError):
            UniformSample(reservoir_size=0)

    def test_percentile_interpolation(self) -> None:
        values = [float(v) for v in range(1, 11)]

        p50, p75, p0, p100 = sample_percentiles(values, [0.5, 0.75, 0.0, 1.0])

        assert p50 == 5.5
        assert p75 == pytest.approx(8.25)
        assert p0 == 1.0
        assert p100 == 10.0


class TestMeter:
    """Test cases for Meter."""

    def test_unmarked_meter_is_zero(self) -> None:
        snapshot = Meter().snapshot()

        assert snapshot.count == 0
        assert (snapshot.rate1, snapshot.rate5, snapshot.rate15) == (0.0, 0.0, 0.0)
        assert snapshot.rate_mean == 0.0

    def test_rates_after_ticks(self) -> None:
        """
        SCENARIO: 5 events, then one and two tick intervals pass
        EXPECTED: First tick sets rate to 1/s, second decays it by EWMA
        """
        # Arrange
        clock = FakeClock()
        meter = Meter(clock=clock)
        meter.mark(5)

        # Act
        clock.now = 5.0
        first = meter.snapshot()
        clock.now = 10.0
        second = meter.snapshot()

        # Assert
        assert first.rate1 == pytest.approx(1.0)
        assert first.rate15 == pytest.approx(1.0)
        assert first.rate_mean == pytest.approx(1.0)
        assert second.rate1 == pytest.approx(math.exp(-5.0 / 60.0))
        assert second.rate5 == pytest.approx(math.exp(-5.0 / 300.0))
        assert second.rate_mean == pytest.approx(0.5)

    def test_no_tick_before_interval(self) -> None:
        clock = FakeClock()
        meter = Meter(clock=clock)
        meter.mark(3)

        clock.now = 4.9
        snapshot = meter.snapshot()

        assert snapshot.count == 3
        assert snapshot.rate1 == 0.0


class TestTimer:
    """Test cases for Timer."""

    def test_update_records_duration_and_event(self) -> None:
        timer = Timer()
        timer.update(0.5)
        timer.update(1.5)

        snapshot = timer.snapshot()

        assert snapshot.kind == MetricKind.TIMER
        assert snapshot.count == 2
        assert snapshot.mean == 1.0
        assert timer.count == 2

    def test_time_context_manager(self) -> None:
        timer = Timer()

        with timer.time():
            pass

        snapshot = timer.snapshot()
        assert snapshot.count == 1
        assert snapshot.min >= 0.0

    def test_time_records_even_on_error(self) -> None:
        timer = Timer()

        with pytest.raises(KeyError):
            with timer.time():
                raise KeyError("boom")

        assert timer.count == 1

    def test_snapshot_consistent_with_concurrent_update(self) -> None:
        """
        SCENARIO: Another thread records a duration while a snapshot is
            between reading the histogram and the meter
        EXPECTED: Count and mean rate describe the same single event
        """
        # Arrange
        clock = FakeClock()
        timer: Timer

        class RacingHistogram(Histogram):
            def snapshot(self):
                writer = threading.Thread(target=timer.update, args=(0.5,))
                writer.start()
                # The writer must not get in before the meter is read
                writer.join(timeout=0.2)
                self.writer = writer
                return super().snapshot()

        histogram = RacingHistogram()
        timer = Timer(histogram=histogram, meter=Meter(clock=clock))
        timer.update(0.1)
        clock.now = 10.0

        # Act
        snapshot = timer.snapshot()
        histogram.writer.join()

        # Assert
        assert snapshot.count == 1
        assert snapshot.values == (0.1,)
        assert snapshot.rate_mean == pytest.approx(1 / 10.0)
        assert timer.count == 2
