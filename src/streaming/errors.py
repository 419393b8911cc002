"""Exception taxonomy for the chat streaming pipeline."""


class StreamError(Exception):
    """Base class for chat stream failures."""

    pass


class DecodeError(StreamError):
    """Raised when a stream frame cannot be parsed as JSON.

    Fatal to the stream: chunks are never skipped on framing errors.
    """

    pass


class TransportError(StreamError):
    """Raised on connection failures and non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ChunkRejectedError(StreamError):
    """Raised when a decoded value is not a usable chunk. Recoverable."""

    pass


class UnknownChunkTypeError(ChunkRejectedError):
    """Raised for a discriminant this client does not know."""

    def __init__(self, chunk_type: object) -> None:
        super().__init__(f"Unknown chunk type: {chunk_type!r}")
        self.chunk_type = chunk_type


class InvalidChunkError(ChunkRejectedError):
    """Raised when a chunk payload does not match its declared type."""

    pass
