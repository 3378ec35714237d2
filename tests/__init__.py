"""
Test Suite for metrics-clickhouse.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Registry-to-store tests against a fake server
    - fixtures/: Fake ClickHouse server and sample configuration

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
"""
