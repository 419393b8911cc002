"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat backend endpoints, auth token
forwarding and request timeouts.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _env_float(name: str) -> float | None:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


class ChatClientConfig(BaseModel):
    """Configuration for the chat backend client.

    Attributes:
        api_base_url: Backend base URL.
        chat_endpoint: Path of the chat collection (list, rename, archive).
        stream_endpoint: Path of the streaming chat endpoint.
        auth_token: Bearer token supplied by the auth collaborator.
        admin_mode: Skip the authentication check (development backends).
        request_timeout: Timeout in seconds for session CRUD calls.
        stream_timeout: Timeout for the stream; None waits indefinitely.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Backend base URL",
    )
    chat_endpoint: str = Field(
        default_factory=lambda: os.getenv("CHAT_ENDPOINT", "/chat"),
        description="Chat collection path",
    )
    stream_endpoint: str = Field(
        default_factory=lambda: os.getenv("CHAT_STREAM_ENDPOINT", "/chat/stream"),
        description="Streaming chat path",
    )
    auth_token: str | None = Field(
        default_factory=lambda: os.getenv("API_AUTH_TOKEN") or None,
        description="Bearer token for backend requests",
    )
    admin_mode: bool = Field(
        default_factory=lambda: _env_flag("ADMIN_MODE"),
        description="Allow unauthenticated requests",
    )
    request_timeout: float = Field(
        default_factory=lambda: _env_float("REQUEST_TIMEOUT") or 30.0,
        gt=0.0,
        description="Timeout for session CRUD requests in seconds",
    )
    stream_timeout: float | None = Field(
        default_factory=lambda: _env_float("STREAM_TIMEOUT"),
        gt=0.0,
        description="Stream timeout in seconds (None for no timeout)",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so endpoint paths join cleanly."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("API base URL required. Set API_BASE_URL in .env")
        return v

    @field_validator("chat_endpoint", "stream_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Endpoint paths are joined onto the base URL and must be absolute."""
        v = v.strip()
        if not v.startswith("/"):
            raise ValueError(f"Endpoint path must start with '/': {v!r}")
        return v.rstrip("/") or "/"

    @property
    def chat_url(self) -> str:
        return f"{self.api_base_url}{self.chat_endpoint}"

    @property
    def stream_url(self) -> str:
        return f"{self.api_base_url}{self.stream_endpoint}"

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the configured token, if any."""
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}


def get_client_config() -> ChatClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ChatClientConfig instance.

    Raises:
        ValueError: If a configured value is invalid.
    """
    return ChatClientConfig()
