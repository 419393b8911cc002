"""Unit tests for individual components in isolation.

Ensures fast execution with no network access.

Coverage:
    - streaming/: Framing, classification, reduction, correlation, cancellation
    - sessions/: Optimistic rename and archive with rollback
    - config: Environment loading and validation

Uses mock transports and AsyncMock services for external calls.
"""
