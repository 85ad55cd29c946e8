"""MCP tool: list_device_templates."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import ToolConfig, generic_service_tool


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the list_device_templates tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``get_service``.

    """
    tool_config = ToolConfig(
        section_name="device_templates",
        log_message="Listing Starfish device templates.",
    )

    @app.tool(
        name="list_device_templates",
        description=(
            "Return JSON describing the device templates of the configured Starfish solution. "
            "Set static to true to list the read-only system templates instead."
        ),
        annotations={
            "title": "List device templates",
            "readOnlyHint": True,
        },
    )
    async def list_device_templates(ctx: Context, static: bool = False) -> dict[str, Any]:
        return await generic_service_tool(
            ctx,
            deps,
            tool_config,
            lambda service: service.get_static_templates() if static else service.get_device_templates(),
        )


__all__ = ["register"]
