"""Helpers for reading and posting observations.

Observation listings are paginated: the API returns a ``next_page`` header
holding an absolute URI for the following page. Unlike devices, an empty
array is a valid page; only a ``null`` body is reported as an error.
"""

import logging
from typing import Any

from ..client.http import QueryParams
from ..exceptions import EmptyResultError
from .common import (
    NEXT_PAGE_NOT_FOUND,
    NO_OBSERVATIONS,
    OperationContext,
    PagedResult,
    authenticated_json,
    authenticated_page,
)
from .devices import devices_url

logger = logging.getLogger("starfish_sdk.operations.observations")


def observations_url(ctx: OperationContext, device_id: str | None = None) -> str:
    """Return the solution-wide or per-device observations URL."""
    if device_id is None:
        return f"{ctx.solution_url}/observations"
    return f"{devices_url(ctx)}/{device_id}/observations"


async def query_observations(ctx: OperationContext, query: QueryParams | None = None) -> PagedResult:
    """Fetch the first page of observations across the solution.

    Raises:
        EmptyResultError: If the response body is ``null``.

    """
    return await authenticated_page(ctx, observations_url(ctx), params=query)


async def get_observations(ctx: OperationContext) -> PagedResult:
    """Fetch the first page of observations without a filter."""
    return await query_observations(ctx, None)


async def query_device_observations(
    ctx: OperationContext,
    device_id: str,
    query: QueryParams | None = None,
) -> PagedResult:
    """Fetch the first page of observations for one device.

    Raises:
        EmptyResultError: If the response body is ``null``.

    """
    return await authenticated_page(ctx, observations_url(ctx, device_id), params=query)


async def get_device_observations(ctx: OperationContext, device_id: str) -> PagedResult:
    """Fetch the first page of observations for one device without a filter."""
    return await query_device_observations(ctx, device_id, None)


async def get_next_page(ctx: OperationContext, next_page: str | None) -> PagedResult:
    """Fetch the page at ``next_page``, an absolute URI returned by a previous page.

    A missing URI fails before the token is consulted.

    Raises:
        EmptyResultError: If ``next_page`` is empty or the response body is ``null``.

    """
    if not next_page:
        raise EmptyResultError(NEXT_PAGE_NOT_FOUND)
    return await authenticated_page(ctx, next_page, empty_message=NEXT_PAGE_NOT_FOUND)


async def post_device_observation(ctx: OperationContext, device_id: str, observation: Any) -> Any:
    """Post an observation for a device and return the API response unchanged."""
    return await authenticated_json(ctx, "POST", observations_url(ctx, device_id), body=observation)


__all__ = [
    "get_device_observations",
    "get_next_page",
    "get_observations",
    "observations_url",
    "post_device_observation",
    "query_device_observations",
    "query_observations",
]
