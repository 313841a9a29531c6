"""Configuration management for the shortlink service."""

from typing import List, Optional, Tuple
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    db_path: str = Field(
        default="data/links.db",
        description="Path to the SQLite database file holding the link tables"
    )

    busy_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="How long a transaction waits for the database lock"
    )

    # Redis settings (optional)
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for caching resolved codes"
    )

    cache_ttl_seconds: int = Field(
        default=3600,
        description="Cache TTL in seconds"
    )

    # Server settings
    host: str = Field(
        default="127.0.0.1",
        description="Host to bind to"
    )

    port: int = Field(
        default=8080,
        ge=0,
        le=65535,
        description="Port to listen on"
    )

    index_file: Optional[str] = Field(
        default=None,
        description="HTML file served on the root path"
    )

    cors_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser"
    )

    # Shortener settings
    code_bytes: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Random bytes per generated code (4 bytes -> 6 characters)"
    )

    max_url_length: int = Field(
        default=2048,
        ge=16,
        description="Longest URL accepted for shortening"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def parse_listen_address(value: str) -> Tuple[str, int]:
    """Split a ``host:port`` listen address.

    Args:
        value: Address such as ``127.0.0.1:8080`` or ``[::1]:8080``

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the address is not of the form host:port
    """
    host, sep, port_text = value.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid listen address (expected host:port): {value!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 hosts must be bracketed: {value!r}")

    if not port_text.isdigit() or not 0 <= int(port_text) <= 65535:
        raise ValueError(f"invalid port in listen address: {value!r}")

    return host, int(port_text)


def load_config(**overrides) -> Config:
    """Load configuration from environment, letting explicit overrides win."""
    return Config(**{k: v for k, v in overrides.items() if v is not None})
