"""Common utilities for MCP tool registration.

Provides helpers that run one service call and shape its result into the
standard tool response.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

from fastmcp import Context

from ..exceptions import EmptyResultError
from ..operations.common import PagedResult
from ..service import StarfishService

type ServiceCall = Callable[[StarfishService], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolConfig:
    """Configuration for a generic read-only tool."""

    section_name: str
    log_message: str


def serialize_result(result: Any) -> dict[str, Any]:
    """Convert an operation result into a JSON section with a status.

    Lists become ``items`` with a ``count``, pages keep ``data`` and
    ``next_page``, and mappings are passed through under ``data``.
    """
    if isinstance(result, PagedResult):
        return {"status": "ok", **result.as_dict()}
    if isinstance(result, list):
        return {"status": "ok", "count": len(result), "items": result}
    return {"status": "ok", "data": result}


def build_tool_response(
    service: StarfishService,
    section_name: str,
    section: dict[str, Any],
) -> dict[str, Any]:
    """Build a standard tool response with metadata.

    Args:
        service: The service the data was read from.
        section_name: Name of the data section (e.g., "devices").
        section: Serialized data or empty-result section.

    Returns:
        Standard response dictionary with metadata.

    """
    return {
        "retrieved_at": datetime.now(UTC).isoformat(),
        "endpoint": service.config.base_url,
        "solution": service.solution,
        section_name: section,
    }


async def generic_service_tool(
    ctx: Context,
    deps: SimpleNamespace,
    tool_config: ToolConfig,
    call: ServiceCall,
) -> dict[str, Any]:
    """Generic implementation for read-only tools.

    Semantic-empty results are reported in the response section instead of
    failing the tool. Token and transport errors propagate to FastMCP.

    Args:
        ctx: FastMCP context.
        deps: Dependencies namespace with ``get_service``.
        tool_config: Section name and log message for the tool.
        call: Coroutine function invoking one service operation.

    Returns:
        Tool response dictionary.

    """
    await ctx.info(tool_config.log_message)
    service: StarfishService = deps.get_service()
    try:
        result = await call(service)
    except EmptyResultError as exc:
        await ctx.warning(str(exc))
        section: dict[str, Any] = {"status": "empty", "message": str(exc)}
    else:
        section = serialize_result(result)
    return build_tool_response(service, tool_config.section_name, section)


__all__ = [
    "ServiceCall",
    "ToolConfig",
    "build_tool_response",
    "generic_service_tool",
    "serialize_result",
]
