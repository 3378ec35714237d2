"""
Unit Tests - Testing Individual Components in Isolation.

ClickHouse is replaced by tests.fixtures.fake_clickhouse; timers use
injected clocks so no test waits on a real interval.

Test Files:
    - test_value_objects.py: Rows, tags, timestamp alignment
    - test_instruments.py: Counters, gauges, histograms, meters, timers
    - test_registry.py: Metrics registry
    - test_flattener.py: Metric to row conversion
    - test_config_loader.py: Configuration loading/validation
    - test_connection_manager.py: Connect, schema bootstrap, ping
    - test_batch_writer.py: Transactional batch insert
    - test_health_monitor.py: Ping and reconnect
    - test_reporter.py: Flush/health scheduling and lifecycle
"""
