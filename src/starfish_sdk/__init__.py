"""Starfish SDK package.

Asynchronous client for the Starfish device and telemetry API. The service,
its configuration and the exception types are re-exported here; the MCP
server lives in ``starfish_sdk.server`` and is only imported on demand so
that the SDK does not pull in FastMCP.
"""

from .config import CredentialsAuth, StarfishConfig, StaticTokenAuth
from .exceptions import ConfigurationError, EmptyResultError, StarfishError, TokenError
from .operations.common import PagedResult
from .service import StarfishService, open_service

__all__: list[str] = [
    "ConfigurationError",
    "CredentialsAuth",
    "EmptyResultError",
    "PagedResult",
    "StarfishConfig",
    "StarfishError",
    "StarfishService",
    "StaticTokenAuth",
    "TokenError",
    "open_service",
]
