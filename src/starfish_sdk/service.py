"""Public entry point for the Starfish SDK.

``StarfishService`` wires the configuration, the token manager and the HTTP
client together and exposes every resource operation as a coroutine method.
Each call resolves to a result or raises exactly once.

Concurrent calls on one instance share the token manager. Refresh is
serialized, so two calls that both find the cached token stale issue a single
token request.
"""

from collections.abc import AsyncIterator, Mapping
from contextlib import AbstractAsyncContextManager, asynccontextmanager, nullcontext
from types import TracebackType
from typing import Any, Self

import httpx

from .client.http import QueryParams, create_http_client
from .client.token_manager import Clock, TokenManager
from .config import StarfishConfig
from .operations import devices, observations, templates
from .operations.common import OperationContext, PagedResult, iter_pages


class StarfishService:
    """Asynchronous client for the Starfish devices, observations and templates API."""

    def __init__(
        self,
        options: StarfishConfig | Mapping[str, Any] | str | None = None,
        solution: str | None = None,
        token_or_client_id: str | None = None,
        secret: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the service.

        Accepts a ``StarfishConfig``, an options mapping
        (``{"endpoint", "solution", "token", "credentials": {"clientId", "clientSecret"}}``)
        or the flat form ``(base_url, solution, token_or_client_id, secret)``.

        Args:
            options: Configuration, options mapping, or base URL.
            solution: Solution name for the flat form.
            token_or_client_id: Token, or client id when ``secret`` is given.
            secret: Client secret for the flat form.
            http_client: HTTP client to use for every request. It is not closed
                by the service.
            clock: Source of the current time used for token expiry checks.

        Raises:
            ConfigurationError: If both or neither of credentials and token are
                given, or credentials are incomplete.

        """
        if isinstance(options, StarfishConfig):
            self.config = options
        elif isinstance(options, Mapping):
            self.config = StarfishConfig.from_options(options)
        else:
            self.config = StarfishConfig.from_args(options, solution, token_or_client_id, secret)

        self._http_client = http_client
        self._session_client: httpx.AsyncClient | None = None
        self._session_cm: AbstractAsyncContextManager[httpx.AsyncClient] | None = None
        self.token_manager = TokenManager(self.config, client_factory=self._client, clock=clock)
        self._ctx = OperationContext(
            config=self.config,
            token_manager=self.token_manager,
            client_factory=self._client,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> Self:
        """Build a service from ``STARFISH_*`` environment variables."""
        return cls(StarfishConfig.from_env(), **kwargs)

    async def __aenter__(self) -> Self:
        """Open a shared HTTP client for the lifetime of the ``async with`` block."""
        if self._http_client is None and self._session_client is None:
            self._session_cm = create_http_client(self.config)
            self._session_client = await self._session_cm.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the shared HTTP client opened by ``__aenter__``."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared HTTP client, if one is open."""
        session_cm, self._session_cm, self._session_client = self._session_cm, None, None
        if session_cm is not None:
            await session_cm.__aexit__(None, None, None)

    def _client(self) -> AbstractAsyncContextManager[httpx.AsyncClient]:
        """Return a context manager yielding the HTTP client for one request."""
        client = self._http_client or self._session_client
        if client is not None:
            return nullcontext(client)
        return create_http_client(self.config)

    @property
    def solution(self) -> str:
        """Return the configured solution name."""
        return self.config.solution

    @property
    def token(self) -> str | None:
        """Return the currently cached bearer token."""
        return self.token_manager.token

    async def with_token(self) -> str:
        """Return a usable bearer token, refreshing it first if required."""
        return await self.token_manager.with_token()

    async def get_token(self, client_id: str, client_secret: str) -> str:
        """Exchange client credentials for a new token without caching it."""
        return await self.token_manager.fetch_token(client_id, client_secret)

    # Devices

    async def get_devices(self) -> list[dict[str, Any]]:
        """Return every device in the solution."""
        return await devices.get_devices(self._ctx)

    async def query_devices(self, query: QueryParams | None = None) -> list[dict[str, Any]]:
        """Return devices matching ``query``."""
        return await devices.query_devices(self._ctx, query)

    async def post_device(self, device: dict[str, Any]) -> Any:
        """Create a device."""
        return await devices.post_device(self._ctx, device)

    async def delete_device(self, device_id: str) -> Any:
        """Delete a device."""
        return await devices.delete_device(self._ctx, device_id)

    # Observations

    async def get_observations(self) -> PagedResult:
        """Return the first page of observations across the solution."""
        return await observations.get_observations(self._ctx)

    async def query_observations(self, query: QueryParams | None = None) -> PagedResult:
        """Return the first page of observations matching ``query``."""
        return await observations.query_observations(self._ctx, query)

    async def get_device_observations(self, device_id: str) -> PagedResult:
        """Return the first page of observations for a device."""
        return await observations.get_device_observations(self._ctx, device_id)

    async def query_device_observations(self, device_id: str, query: QueryParams | None = None) -> PagedResult:
        """Return the first page of a device's observations matching ``query``."""
        return await observations.query_device_observations(self._ctx, device_id, query)

    async def get_next_page(self, next_page: str | None) -> PagedResult:
        """Return the page at ``next_page``."""
        return await observations.get_next_page(self._ctx, next_page)

    async def post_device_observation(self, device_id: str, observation: Any) -> Any:
        """Post an observation for a device."""
        return await observations.post_device_observation(self._ctx, device_id, observation)

    async def iter_observation_pages(
        self,
        device_id: str | None = None,
        query: QueryParams | None = None,
    ) -> AsyncIterator[PagedResult]:
        """Yield observation pages, following ``next_page`` until the last one."""
        if device_id is None:
            first = await self.query_observations(query)
        else:
            first = await self.query_device_observations(device_id, query)
        async for page in iter_pages(first, self.get_next_page):
            yield page

    # Device templates

    async def get_device_templates(self) -> dict[str, Any]:
        """Return the solution's device templates."""
        return await templates.get_device_templates(self._ctx)

    async def get_static_templates(self) -> Any:
        """Return the system tenant's static device templates."""
        return await templates.get_static_templates(self._ctx)

    async def post_device_template(self, device_template: dict[str, Any]) -> Any:
        """Create a device template."""
        return await templates.post_device_template(self._ctx, device_template)

    async def put_device_template(self, template_id: str, device_template: dict[str, Any]) -> Any:
        """Replace a device template."""
        return await templates.put_device_template(self._ctx, template_id, device_template)


@asynccontextmanager
async def open_service(config: StarfishConfig, **kwargs: Any) -> AsyncIterator[StarfishService]:
    """Create a ``StarfishService`` sharing one HTTP client for the block."""
    async with StarfishService(config, **kwargs) as service:
        yield service


__all__ = ["StarfishService", "open_service"]
