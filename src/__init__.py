"""Policy Chat Client - streaming client for the policy chatbot backend.

Combines httpx for HTTP streaming, Pydantic for data validation, and an
asyncio-based pipeline that folds streamed reply chunks into chat state.

Components:
    - streaming: chunk decoding, classification, reduction and stream lifecycle
    - chat: conversation controller invoked by UI event handlers
    - sessions: session list and backend session CRUD client
    - models: message, session and stream chunk schemas
"""

__version__ = "0.1.0"
