"""Chunk dispatcher: narrows decoded values into typed stream chunks."""

from typing import Any

from pydantic import BaseModel, ValidationError

from src.models.schemas import (
    ChatInfoChunk,
    ErrorChunk,
    StatusChunk,
    StreamChunk,
    TextDeltaChunk,
)
from src.streaming.errors import InvalidChunkError, UnknownChunkTypeError

CHUNK_TYPES: dict[str, type[BaseModel]] = {
    "chat_info": ChatInfoChunk,
    "text_delta": TextDeltaChunk,
    "status": StatusChunk,
    "error": ErrorChunk,
}


def classify(value: Any) -> StreamChunk:
    """Classify one decoded value by its ``type`` discriminant.

    Args:
        value: A JSON value produced by the chunk decoder.

    Returns:
        The matching chunk model, fully validated.

    Raises:
        UnknownChunkTypeError: If the discriminant is not recognized.
        InvalidChunkError: If the value is not an object or its payload does
            not match the declared type.
    """
    if not isinstance(value, dict):
        raise InvalidChunkError(f"Expected a JSON object, got {type(value).__name__}")

    chunk_type = value.get("type")
    model = CHUNK_TYPES.get(chunk_type) if isinstance(chunk_type, str) else None
    if model is None:
        raise UnknownChunkTypeError(chunk_type)

    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise InvalidChunkError(
            f"Invalid {chunk_type} chunk: {e.error_count()} validation error(s)"
        ) from e
