"""Token management utilities for the Starfish API."""

import asyncio
import base64
import binascii
import json
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import CredentialsAuth, StarfishConfig, StaticTokenAuth
from ..exceptions import TokenError
from .http import request_json

logger = logging.getLogger("starfish_sdk.token_manager")

type Clock = Callable[[], datetime]
type ClientFactory = Callable[[], AbstractAsyncContextManager[httpx.AsyncClient]]

TOKEN_SEGMENTS = 3


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def get_token_exp(token: str) -> datetime:
    """Decode the ``exp`` claim from a compact, Starfish-issued token.

    Only the expiration claim is read. The signature is not verified, so do not
    reuse this helper to authenticate untrusted tokens.

    Raises:
        ValueError: If the token is not three dot-separated segments, the
            payload is not base64url-encoded JSON, or ``exp`` is missing.

    """
    parts = token.split(".")
    if len(parts) != TOKEN_SEGMENTS:
        msg = "Invalid token format"
        raise ValueError(msg)
    payload_b64 = parts[1]
    padding = "=" * (-len(payload_b64) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(payload_b64 + padding).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError) as exc:
        msg = f"Invalid token payload: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(payload, dict):
        msg = "Token payload is not a JSON object"
        raise ValueError(msg)
    exp = payload.get("exp")
    if exp is None:
        msg = "Token missing 'exp' field"
        raise ValueError(msg)
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        msg = "Token 'exp' field is not numeric"
        raise ValueError(msg)
    try:
        return datetime.fromtimestamp(exp, tz=UTC)
    except (OverflowError, OSError) as exc:
        msg = f"Token 'exp' field is out of range: {exp}"
        raise ValueError(msg) from exc


class TokenManager:
    """Hold the bearer token for a service and refresh it when necessary.

    In credentials mode the token is fetched from ``{endpoint}/tokens`` on the
    first call and again whenever the cached token has expired. In token mode
    the caller-supplied token is returned unchanged and never decoded.
    """

    def __init__(
        self,
        config: StarfishConfig,
        *,
        client_factory: ClientFactory,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the token manager.

        Args:
            config: The resolved Starfish configuration.
            client_factory: Callable returning an async context manager that
                yields the HTTP client used for token requests.
            clock: Source of the current time, defaults to ``utc_now``.

        """
        self._config = config
        self._client_factory = client_factory
        self._clock = clock or utc_now
        auth = config.auth
        self._cached_token: str | None = auth.token if isinstance(auth, StaticTokenAuth) else None
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def token(self) -> str | None:
        """Return the currently cached token, if any."""
        return self._cached_token

    def _ensure_lock(self) -> asyncio.Lock:
        """Return an asyncio lock bound to the current event loop.

        Creates a new lock if one does not exist or if the event loop has changed.
        """
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def is_expired(self, token: str) -> bool:
        """Return True when the token's ``exp`` claim lies before the current time.

        Raises:
            ValueError: If the expiry claim cannot be decoded.

        """
        return get_token_exp(token) < self._clock()

    def should_refresh(self) -> bool:
        """Return True when a new token must be fetched before the next call.

        Raises:
            ValueError: If the cached token's expiry claim cannot be decoded.

        """
        if not self._config.uses_credentials:
            return False
        return not self._cached_token or self.is_expired(self._cached_token)

    async def with_token(self) -> str:
        """Return a usable token, fetching a new one first if required.

        Returns:
            The cached, refreshed, or caller-supplied token.

        Raises:
            TokenError: If the cached token cannot be decoded. No request is made.
            httpx.HTTPError: If the token request fails. The cache is unchanged.

        """
        lock = self._ensure_lock()
        async with lock:
            try:
                needs_refresh = self.should_refresh()
            except ValueError as exc:
                logger.warning("Cached token could not be decoded: %s", exc)
                raise TokenError.from_decode_failure(exc) from exc

            if not needs_refresh:
                return self._cached_token  # type: ignore[return-value]

            auth = self._config.auth
            if not isinstance(auth, CredentialsAuth):  # pragma: no cover (guarded by should_refresh)
                msg = "Token refresh requires client credentials."
                raise TokenError(msg)
            token = await self.fetch_token(auth.client_id, auth.client_secret)
            self._cached_token = token
            logger.debug("Cached new bearer token from Starfish API.")
            return token

    async def fetch_token(self, client_id: str, client_secret: str) -> str:
        """Exchange client credentials for a new bearer token.

        Args:
            client_id: Starfish client id.
            client_secret: Starfish client secret.

        Returns:
            The ``accessToken`` from the token endpoint response.

        Raises:
            TokenError: If the response carries no access token.
            httpx.HTTPError: If the request fails; raised unchanged.

        """
        logger.debug("Requesting bearer token for client %s.", client_id)
        try:
            async with self._client_factory() as client:
                response = await request_json(
                    client,
                    "POST",
                    f"{self._config.base_url}/tokens",
                    headers={"Accept": "application/json"},
                    body={"clientId": client_id, "clientSecret": client_secret},
                )
        except Exception:
            logger.exception("Failed to authenticate with Starfish")
            raise

        token = _extract_access_token(response)
        if not token:
            msg = "Starfish authentication succeeded but returned no accessToken."
            raise TokenError(msg)
        return token


def _extract_access_token(response: Any) -> str | None:
    if not isinstance(response, dict):
        return None
    token = response.get("accessToken")
    return token if isinstance(token, str) else None


__all__ = ["ClientFactory", "Clock", "TokenManager", "get_token_exp", "utc_now"]
