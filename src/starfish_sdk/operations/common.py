"""Common utilities for Starfish operations modules.

This module contains the context shared by every resource operation, the
authenticated request helpers and the paging result type.

Every operation is a two-stage pipeline: obtain a token through
``TokenManager.with_token`` and then perform exactly one request. If the
first stage raises, the request is never sent.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..client.http import QueryParams, request_json, request_json_with_next_page
from ..client.token_manager import ClientFactory, TokenManager
from ..config import StarfishConfig
from ..exceptions import EmptyResultError

logger = logging.getLogger("starfish_sdk.operations.common")

NO_OBSERVATIONS = "No observations found"
NEXT_PAGE_NOT_FOUND = "next_page not found"

# Type aliases using Python 3.12+ syntax
type JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None
type PageFetcher = Callable[[str], Awaitable[PagedResult]]


@dataclass(frozen=True, slots=True)
class OperationContext:
    """Dependencies shared by resource operations.

    Groups related parameters to reduce function argument counts.
    """

    config: StarfishConfig
    token_manager: TokenManager
    client_factory: ClientFactory

    @property
    def solution_url(self) -> str:
        """Return the solution-scoped API root."""
        return self.config.solution_url


@dataclass(frozen=True, slots=True)
class PagedResult:
    """One page of a list-style endpoint.

    Attributes:
        data: The parsed response body.
        next_page: Absolute URI of the next page, passed back verbatim to
            ``get_next_page``. ``None`` on the last page.

    """

    data: JsonValue
    next_page: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Render the page as ``{"data": ...}`` plus ``next_page`` when present."""
        result: dict[str, Any] = {"data": self.data}
        if self.next_page:
            result["next_page"] = self.next_page
        return result


def prepare_paging_response(body: JsonValue, next_page: str | None) -> PagedResult:
    """Wrap a response body and its ``next_page`` header into a ``PagedResult``."""
    return PagedResult(data=body, next_page=next_page or None)


async def authenticated_json(
    ctx: OperationContext,
    method: str,
    uri: str,
    *,
    params: QueryParams | None = None,
    body: Any = None,
) -> Any:
    """Obtain a token, perform one request and return the parsed body."""
    token = await ctx.token_manager.with_token()
    async with ctx.client_factory() as client:
        return await request_json(client, method, uri, token=token, params=params, body=body)


async def authenticated_page(
    ctx: OperationContext,
    uri: str,
    *,
    params: QueryParams | None = None,
    empty_message: str = NO_OBSERVATIONS,
) -> PagedResult:
    """Obtain a token, GET ``uri`` and normalize the response into a page.

    A ``null`` or empty body is reported as ``EmptyResultError``. Empty JSON
    arrays and objects are valid pages.

    Raises:
        EmptyResultError: If the response body is ``None``.

    """
    token = await ctx.token_manager.with_token()
    async with ctx.client_factory() as client:
        body, next_page = await request_json_with_next_page(client, "GET", uri, token=token, params=params)
    if body is None:
        logger.warning("%s (GET %s)", empty_message, uri)
        raise EmptyResultError(empty_message)
    return prepare_paging_response(body, next_page)


async def iter_pages(first: PagedResult, fetch_next: PageFetcher) -> AsyncIterator[PagedResult]:
    """Yield ``first`` and then every page reachable through ``next_page``.

    Args:
        first: The page returned by the initial list call.
        fetch_next: Coroutine function fetching a page by its ``next_page`` URI.

    Yields:
        Each page in order, stopping after the first page without ``next_page``.

    """
    page: PagedResult | None = first
    while page is not None:
        yield page
        page = await fetch_next(page.next_page) if page.next_page else None


__all__ = [
    "NEXT_PAGE_NOT_FOUND",
    "NO_OBSERVATIONS",
    "JsonValue",
    "OperationContext",
    "PageFetcher",
    "PagedResult",
    "authenticated_json",
    "authenticated_page",
    "iter_pages",
    "prepare_paging_response",
]
