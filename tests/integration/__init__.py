"""
Integration Tests - Registry to Store.

These tests wire a real registry, flattener, writer and reporter to
the in-memory FakeClickHouseServer.

Test Files:
    - test_reporter_end_to_end.py: Export scenarios and entry points
"""
