"""Integration tests for components working together as a system.

No mocks for core functionality - requests go through httpx to a FastAPI
stand-in for the chat backend.

Coverage:
    - Chat turns from send() to final conversation and session state
    - Session switching races against in-flight streams
    - Session CRUD endpoints, authentication and error translation
"""
