"""Entry point for the Starfish MCP server.

This module wires together the FastMCP app and registers read-only tools
backed by a ``StarfishService`` configured from ``STARFISH_*`` environment
variables.

Registered tools:
- ``list_devices``: list devices in the configured solution
- ``list_observations``: list the first page of observations
- ``get_next_page``: follow a ``next_page`` URI
- ``list_device_templates``: list solution or static device templates
"""

import logging
import os
import signal
import sys
from functools import cache
from types import SimpleNamespace

from fastmcp import FastMCP

from . import prompts
from .service import StarfishService
from .tools.list_device_templates import register as register_list_device_templates
from .tools.list_devices import register as register_list_devices
from .tools.list_observations import register as register_list_observations

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("starfish_sdk.server")

app = FastMCP(
    name="starfish-mcp",
    instructions="Expose read-only tools that query a Starfish solution for devices, observations and templates.",
)


@cache
def get_service() -> StarfishService:
    """Return the process-wide service, building it from the environment on first use."""
    service = StarfishService.from_env()
    logger.info("Using Starfish solution '%s' at %s", service.solution, service.config.base_url)
    return service


def _register_capabilities() -> None:
    """Register tool and prompt modules with the app instance."""
    deps = SimpleNamespace(get_service=get_service)
    register_list_devices(app, deps=deps)
    register_list_observations(app, deps=deps)
    register_list_device_templates(app, deps=deps)
    prompts.register(app)


# Register all capabilities with the app instance (after function is defined)
_register_capabilities()


def handle_interrupt(signum: int, frame: object) -> None:  # noqa: ARG001
    """Handle keyboard interrupt gracefully."""
    logger.info("Received interrupt signal, shutting down...")
    sys.exit(0)


def main() -> None:
    """Entry point for the starfish-mcp console script."""
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)
    app.run()


__all__ = [
    "app",
    "get_service",
    "handle_interrupt",
    "main",
]


if __name__ == "__main__":
    main()
