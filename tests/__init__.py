"""Test package for the policy chat client.

Unit tests cover isolated pipeline logic; integration tests drive the
controller and session client over HTTP against an in-process backend.

Structure:
    - unit/: Decoder, dispatcher, reducer, correlator, orchestrator, store, config
    - integration/: Full chat turns and session CRUD over httpx transports
    - helpers.py: Stream body builders and the fake backend state

Leverages pytest with pytest-check for soft assertions.
"""
