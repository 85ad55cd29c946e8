"""Helpers for listing, creating and deleting devices in a solution."""

import logging
from typing import Any

from ..client.http import QueryParams
from ..exceptions import EmptyResultError
from .common import OperationContext, authenticated_json

logger = logging.getLogger("starfish_sdk.operations.devices")

NO_DEVICES = "No devices found"


def devices_url(ctx: OperationContext) -> str:
    """Return the devices collection URL for the configured solution."""
    return f"{ctx.solution_url}/devices"


async def query_devices(ctx: OperationContext, query: QueryParams | None = None) -> list[dict[str, Any]]:
    """Fetch devices matching ``query``.

    An empty result is indistinguishable from an unknown filter, so it is
    reported as an error rather than an empty list.

    Args:
        ctx: Operation context with config, token manager and client factory.
        query: Optional filter appended as a query string.

    Returns:
        The non-empty ``devices`` array from the response.

    Raises:
        EmptyResultError: If the response has no devices.

    """
    response = await authenticated_json(ctx, "GET", devices_url(ctx), params=query)
    devices = response.get("devices") if isinstance(response, dict) else None
    if not devices:
        logger.warning("%s (query=%s)", NO_DEVICES, query)
        raise EmptyResultError(NO_DEVICES, body=response)
    return devices


async def get_devices(ctx: OperationContext) -> list[dict[str, Any]]:
    """Fetch every device in the solution."""
    return await query_devices(ctx, None)


async def post_device(ctx: OperationContext, device: dict[str, Any]) -> Any:
    """Create a device and return the API response unchanged."""
    return await authenticated_json(ctx, "POST", f"{devices_url(ctx)}/", body=device)


async def delete_device(ctx: OperationContext, device_id: str) -> Any:
    """Delete a device and return the API response unchanged."""
    return await authenticated_json(ctx, "DELETE", f"{devices_url(ctx)}/{device_id}")


__all__ = [
    "NO_DEVICES",
    "delete_device",
    "devices_url",
    "get_devices",
    "post_device",
    "query_devices",
]
