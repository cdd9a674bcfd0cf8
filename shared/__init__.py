"""
Shared utilities for the cache provider library.

This package aggregates common building blocks consumed by the providers:

- config: Cache configuration via pydantic-settings
- logging: Structured logging setup
- metrics: Prometheus cache counters
- errors: Canonical error types and responses

Do not import from the caching package into shared/.
"""
