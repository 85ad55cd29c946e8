"""MCP tool: list_devices.

Lists the devices in the configured Starfish solution, optionally filtered by
query parameters.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import ToolConfig, generic_service_tool


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the list_devices tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``get_service``.

    """
    tool_config = ToolConfig(
        section_name="devices",
        log_message="Listing Starfish devices.",
    )

    @app.tool(
        name="list_devices",
        description=(
            "Return JSON describing the devices in the configured Starfish solution. "
            "Optional query parameters are passed to the API as filters."
        ),
        annotations={
            "title": "List devices",
            "readOnlyHint": True,
        },
    )
    async def list_devices(ctx: Context, query: dict[str, str] | None = None) -> dict[str, Any]:
        return await generic_service_tool(
            ctx,
            deps,
            tool_config,
            lambda service: service.query_devices(query),
        )


__all__ = ["register"]
