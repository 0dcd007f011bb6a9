"""Configuration module for replayable body middleware.

This module provides the ReplayableBodyConfig class for configuring which
requests get their bodies buffered, how buffered bodies are decoded as
text, and where the adapters publish the buffered body.

Example:
    Basic usage with defaults:

        >>> config = ReplayableBodyConfig()
        >>> config.enabled_methods
        ['POST', 'PUT', 'PATCH', 'DELETE']

    Custom configuration:

        >>> config = ReplayableBodyConfig(
        ...     enabled_methods=["POST"],
        ...     encoding="latin-1",
        ...     state_key="raw_body",
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['REPLAYABLE_BODY_ENABLED_METHODS'] = 'POST,PUT'
        >>> os.environ['REPLAYABLE_BODY_CHUNK_SIZE'] = '4096'
        >>> config = ReplayableBodyConfig.from_env()
"""

import codecs
import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Valid HTTP methods for buffering
VALID_HTTP_METHODS = {
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
    "PATCH",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ReplayableBodyConfig(BaseModel):
    """Configuration for replayable body middleware.

    Attributes:
        enabled_methods: HTTP methods whose request bodies are buffered.
            Requests with other methods pass through untouched. Default
            includes the methods that usually carry a body: POST, PUT,
            PATCH, DELETE.
        encoding: Text encoding used by text access on the buffered body.
            Must name a codec known to Python. Default is "utf-8".
        state_key: Key under which adapters publish the ReplayableBody, in
            the ASGI scope state or the WSGI environ. Default is
            "replayable_body".
        chunk_size: Chunk size in bytes for chunked iteration over the
            buffered body. Must be between 1 and 16777216 (16 MiB).
            Default is 65536.
        log_bodies: If True, a short preview of each buffered body is
            included in debug logs. Default is False, which logs the length
            only.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    enabled_methods: list[str] | str = Field(
        default=["POST", "PUT", "PATCH", "DELETE"],
        description="List of HTTP methods whose bodies are buffered",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding for text access on buffered bodies",
    )
    state_key: str = Field(
        default="replayable_body",
        description="Key under which the buffered body is published",
    )
    chunk_size: int = Field(
        default=65536,
        description="Chunk size in bytes for chunked iteration (1-16777216)",
    )
    log_bodies: bool = Field(
        default=False,
        description="Include a body preview in debug logs",
    )

    model_config = {"frozen": True}

    @field_validator("enabled_methods", mode="before")
    @classmethod
    def validate_enabled_methods(cls, v: Any) -> list[str]:
        """Validate and normalize enabled HTTP methods.

        Args:
            v: List of HTTP method strings or comma-separated string.

        Returns:
            List of uppercase, validated HTTP methods.

        Raises:
            ValueError: If any method is not a valid HTTP method.

        Example:
            >>> config = ReplayableBodyConfig(enabled_methods=["post", "put"])
            >>> config.enabled_methods
            ['POST', 'PUT']
        """
        if isinstance(v, str):
            # Handle comma-separated string (from environment variables)
            v = [method.strip() for method in v.split(",") if method.strip()]

        if not isinstance(v, list):
            raise ValueError("enabled_methods must be a list or comma-separated string")

        methods = [method.upper() for method in v]

        invalid_methods = set(methods) - VALID_HTTP_METHODS
        if invalid_methods:
            raise ValueError(
                f"Invalid HTTP methods: {', '.join(sorted(invalid_methods))}. "
                f"Valid methods are: {', '.join(sorted(VALID_HTTP_METHODS))}"
            )

        return methods

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate the encoding names a known codec.

        Raises:
            ValueError: If Python has no codec by that name.
        """
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v

    @field_validator("state_key")
    @classmethod
    def validate_state_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("state_key cannot be empty")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Validate chunk size is within acceptable range.

        Raises:
            ValueError: If chunk size is not between 1 and 16777216.
        """
        if not (1 <= v <= 16777216):
            raise ValueError(f"chunk_size must be between 1 and 16777216 (16 MiB), got {v}")
        return v

    def buffers_method(self, method: str) -> bool:
        """Return True if requests with this method get their body buffered."""
        return method.upper() in self.enabled_methods

    @classmethod
    def from_env(cls, prefix: str = "REPLAYABLE_BODY_") -> "ReplayableBodyConfig":
        """Create configuration from environment variables.

        Variable names are the uppercase field names with the prefix.
        Missing variables keep their defaults.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            ReplayableBodyConfig populated from environment variables.

        Raises:
            ValueError: If a boolean variable has an unrecognized value.

        Example:
            >>> import os
            >>> os.environ['REPLAYABLE_BODY_ENCODING'] = 'latin-1'
            >>> os.environ['REPLAYABLE_BODY_LOG_BODIES'] = 'true'
            >>> config = ReplayableBodyConfig.from_env()
            >>> config.encoding
            'latin-1'
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "enabled_methods": list,
            "encoding": str,
            "state_key": str,
            "chunk_size": int,
            "log_bodies": bool,
        }

        for field_name, field_type in field_types.items():
            env_var = f"{prefix}{field_name.upper()}"
            env_value = os.environ.get(env_var)

            if env_value is None:
                continue

            if field_type is int:
                config_dict[field_name] = int(env_value)
            elif field_type is bool:
                normalized = env_value.strip().lower()
                if normalized in _TRUE_VALUES:
                    config_dict[field_name] = True
                elif normalized in _FALSE_VALUES:
                    config_dict[field_name] = False
                else:
                    raise ValueError(f"{env_var} must be a boolean, got {env_value!r}")
            else:
                # Lists stay comma-separated strings for the validators
                config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ReplayableBodyConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
