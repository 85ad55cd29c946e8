"""Configuration management for the Starfish SDK.

This module defines the ``StarfishConfig`` model and the helpers that build it
from the two constructor forms accepted by ``StarfishService`` (an options
mapping or flat positional arguments) and from environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

# Load variables from a local .env file for development convenience
load_dotenv()

DEFAULT_ENDPOINT = "https://api.data-platform.developer.ssni.com"
DEFAULT_SOLUTION = "sandbox"


class CredentialsAuth(BaseModel):
    """Client credentials exchanged for bearer tokens on demand."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["credentials"] = "credentials"
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)


class StaticTokenAuth(BaseModel):
    """A caller-supplied bearer token that is used as-is and never refreshed."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["token"] = "token"
    token: str = Field(min_length=1, repr=False)


AuthMode = Annotated[CredentialsAuth | StaticTokenAuth, Field(discriminator="mode")]


class StarfishConfig(BaseModel):
    """Configuration values required to talk to the Starfish API."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = DEFAULT_ENDPOINT
    solution: str = DEFAULT_SOLUTION
    auth: AuthMode
    verify_ssl: bool = True
    timeout_ms: int = Field(default=10000, ge=1000, le=600000)

    @property
    def base_url(self) -> str:
        """Return the endpoint without a trailing slash."""
        return self.endpoint.rstrip("/")

    @property
    def solution_url(self) -> str:
        """Return the solution-scoped API root."""
        return f"{self.base_url}/api/solutions/{self.solution}"

    @property
    def uses_credentials(self) -> bool:
        """Return True when tokens are fetched with client credentials."""
        return isinstance(self.auth, CredentialsAuth)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> StarfishConfig:
        """Build a configuration from an options mapping.

        Recognised keys are ``endpoint``, ``solution``, ``token`` and
        ``credentials`` (a mapping with ``clientId`` and ``clientSecret``).
        Additional keys ``verify_ssl`` and ``timeout_ms`` are passed through.

        Raises:
            ConfigurationError: If both or neither of ``credentials`` and
                ``token`` are given, or if credentials are incomplete.

        """
        credentials = options.get("credentials")
        token = options.get("token")
        if credentials and token:
            msg = "Specify either credentials or token, not both"
            raise ConfigurationError(msg)
        if not credentials and not token:
            msg = "Specify either credentials or token"
            raise ConfigurationError(msg)

        auth: CredentialsAuth | StaticTokenAuth
        if credentials:
            client_id = credentials.get("clientId")
            client_secret = credentials.get("clientSecret")
            if not client_id or not client_secret:
                msg = "Credentials requires clientId and clientSecret"
                raise ConfigurationError(msg)
            auth = _build(CredentialsAuth, client_id=client_id, client_secret=client_secret)
        else:
            auth = _build(StaticTokenAuth, token=token)

        raw_config: dict[str, Any] = {
            "endpoint": options.get("endpoint") or DEFAULT_ENDPOINT,
            "solution": options.get("solution") or DEFAULT_SOLUTION,
            "auth": auth,
        }
        for key in ("verify_ssl", "timeout_ms"):
            if options.get(key) is not None:
                raw_config[key] = options[key]
        return _build(cls, **raw_config)

    @classmethod
    def from_args(
        cls,
        endpoint: str | None,
        solution: str | None,
        token_or_client_id: str | None,
        secret: str | None = None,
    ) -> StarfishConfig:
        """Build a configuration from the flat positional constructor form.

        A ``secret`` selects credentials mode with ``token_or_client_id`` as
        the client id; without one, ``token_or_client_id`` is the token.
        """
        if secret:
            options: dict[str, Any] = {
                "credentials": {"clientId": token_or_client_id, "clientSecret": secret},
            }
        else:
            options = {"token": token_or_client_id}
        options["endpoint"] = endpoint
        options["solution"] = solution
        return cls.from_options(options)

    @classmethod
    def from_env(cls) -> StarfishConfig:
        """Build a configuration object from environment variables."""
        options: dict[str, Any] = {
            "endpoint": os.getenv("STARFISH_ENDPOINT"),
            "solution": os.getenv("STARFISH_SOLUTION"),
            "token": os.getenv("STARFISH_TOKEN"),
            "verify_ssl": os.getenv("STARFISH_VERIFY_SSL"),
            "timeout_ms": os.getenv("STARFISH_TIMEOUT_MS"),
        }
        client_id = os.getenv("STARFISH_CLIENT_ID")
        client_secret = os.getenv("STARFISH_CLIENT_SECRET")
        if client_id or client_secret:
            options["credentials"] = {"clientId": client_id, "clientSecret": client_secret}
        return cls.from_options(options)


def _build(model: type[Any], **values: Any) -> Any:
    """Instantiate a pydantic model, converting validation failures."""
    try:
        return model(**values)
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        msg = f"Invalid Starfish configuration: {messages}"
        raise ConfigurationError(msg) from exc


__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_SOLUTION",
    "AuthMode",
    "CredentialsAuth",
    "StarfishConfig",
    "StaticTokenAuth",
]
