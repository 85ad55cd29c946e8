"""Helpers for device templates.

Solution templates live under ``/api/solutions/{solution}/devicetemplates``.
The static system templates are served from the system tenant and are
read-only.
"""

import logging
from typing import Any

from ..exceptions import EmptyResultError
from .common import OperationContext, authenticated_json

logger = logging.getLogger("starfish_sdk.operations.templates")

NO_DEVICE_TEMPLATES = "No device templates found"
STATIC_TEMPLATES_PATH = "/api/tenants/systemTenant/devicetemplates"


def templates_url(ctx: OperationContext) -> str:
    """Return the device templates collection URL for the configured solution."""
    return f"{ctx.solution_url}/devicetemplates"


async def get_device_templates(ctx: OperationContext) -> dict[str, Any]:
    """Fetch the solution's device templates.

    Returns:
        The full response body, whose ``deviceTemplates`` array is non-empty.

    Raises:
        EmptyResultError: If ``deviceTemplates`` is missing or empty.

    """
    response = await authenticated_json(ctx, "GET", templates_url(ctx))
    templates = response.get("deviceTemplates") if isinstance(response, dict) else None
    if not templates:
        logger.warning(NO_DEVICE_TEMPLATES)
        raise EmptyResultError(NO_DEVICE_TEMPLATES, body=response)
    return response


async def get_static_templates(ctx: OperationContext) -> Any:
    """Fetch the system tenant's static device templates unchanged."""
    return await authenticated_json(ctx, "GET", f"{ctx.config.base_url}{STATIC_TEMPLATES_PATH}")


async def add_or_update_device_template(
    ctx: OperationContext,
    device_template: dict[str, Any],
    url: str,
    method: str,
) -> Any:
    """Send ``device_template`` to ``url`` with ``method`` and return the response unchanged."""
    return await authenticated_json(ctx, method, url, body=device_template)


async def post_device_template(ctx: OperationContext, device_template: dict[str, Any]) -> Any:
    """Create a device template."""
    return await add_or_update_device_template(ctx, device_template, templates_url(ctx), "POST")


async def put_device_template(ctx: OperationContext, template_id: str, device_template: dict[str, Any]) -> Any:
    """Replace the device template ``template_id``."""
    url = f"{templates_url(ctx)}/{template_id}"
    return await add_or_update_device_template(ctx, device_template, url, "PUT")


__all__ = [
    "NO_DEVICE_TEMPLATES",
    "STATIC_TEMPLATES_PATH",
    "add_or_update_device_template",
    "get_device_templates",
    "get_static_templates",
    "post_device_template",
    "put_device_template",
    "templates_url",
]
