"""MCP tools: list_observations and get_next_page.

``list_observations`` returns the first page of observations for the solution
or for a single device. ``get_next_page`` follows the ``next_page`` URI that a
previous page returned.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..service import StarfishService
from .common import ToolConfig, generic_service_tool


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the observation tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_service``.

    """
    list_config = ToolConfig(
        section_name="observations",
        log_message="Listing Starfish observations.",
    )
    next_page_config = ToolConfig(
        section_name="observations",
        log_message="Fetching the next page of Starfish observations.",
    )

    @app.tool(
        name="list_observations",
        description=(
            "Return the first page of observations in the configured Starfish solution, "
            "or for one device when device_id is given. The response includes next_page "
            "when more observations are available."
        ),
        annotations={
            "title": "List observations",
            "readOnlyHint": True,
        },
    )
    async def list_observations(
        ctx: Context,
        device_id: str | None = None,
        query: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        async def _call(service: StarfishService) -> Any:
            if device_id:
                return await service.query_device_observations(device_id, query)
            return await service.query_observations(query)

        return await generic_service_tool(ctx, deps, list_config, _call)

    @app.tool(
        name="get_next_page",
        description="Return the page of observations at a next_page URI returned by list_observations.",
        annotations={
            "title": "Get next page",
            "readOnlyHint": True,
        },
    )
    async def get_next_page(ctx: Context, next_page: str) -> dict[str, Any]:
        return await generic_service_tool(
            ctx,
            deps,
            next_page_config,
            lambda service: service.get_next_page(next_page),
        )


__all__ = ["register"]
