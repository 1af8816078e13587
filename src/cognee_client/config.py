"""Client configuration for the Cognee client."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_BASE_URL = "http://localhost:8000"

ENV_BASE_URL = "COGNEE_BASE_URL"
ENV_API_KEY = "COGNEE_API_KEY"
ENV_AUTH_TOKEN = "COGNEE_AUTH_TOKEN"
ENV_TIMEOUT = "COGNEE_TIMEOUT"


class ClientConfig(BaseModel):
    """
    Connection settings shared by every request.

    ``api_key`` is sent as the ``X-Api-Key`` header and ``auth_token`` as a
    bearer ``Authorization`` header. Both may be set at once; the server
    decides which one wins. ``timeout`` of ``None`` leaves requests unbounded.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    auth_token: Optional[str] = None
    timeout: Optional[float] = None

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        if not v:
            raise ValueError("base_url must not be empty")
        return v.rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from ``COGNEE_*`` environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``)

        Returns:
            ClientConfig with unset variables left at their defaults
        """
        env = os.environ if environ is None else environ
        timeout = env.get(ENV_TIMEOUT)
        return cls(
            base_url=env.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
            api_key=env.get(ENV_API_KEY) or None,
            auth_token=env.get(ENV_AUTH_TOKEN) or None,
            timeout=float(timeout) if timeout else None,
        )

    def with_auth_token(self, auth_token: Optional[str]) -> "ClientConfig":
        """Return a copy carrying a different bearer token."""
        return self.model_copy(update={"auth_token": auth_token})
