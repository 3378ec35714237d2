"""
Test Fixtures - Shared Test Data and Fakes.

This package contains reusable test fixtures:
    - sample_config.yaml: Sample reporter configuration
    - fake_clickhouse: In-memory ClickHouse server and clients

Usage:
    Import fixtures in test files via pytest fixtures or direct import.
"""
