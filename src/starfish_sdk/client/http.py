"""HTTP request pipeline for the Starfish API.

Provides the async context manager that creates a configured ``httpx`` client
and ``send_request``, which performs exactly one JSON request per call.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from ..config import StarfishConfig

logger = logging.getLogger("starfish_sdk.http")

JSON_CONTENT_TYPE = "application/json"
NEXT_PAGE_HEADER = "next_page"
BODY_METHODS = frozenset({"POST", "PUT"})

type QueryParams = Mapping[str, Any]


@asynccontextmanager
async def create_http_client(config: StarfishConfig) -> AsyncIterator[httpx.AsyncClient]:
    """Create an ``httpx.AsyncClient`` with the configured TLS and timeout settings.

    Args:
        config: The configuration containing TLS verification and timeouts.

    Yields:
        Configured async HTTP client, closed on exit.

    """
    timeout = httpx.Timeout(config.timeout_ms / 1000)
    async with httpx.AsyncClient(verify=config.verify_ssl, timeout=timeout) as client:
        yield client


def query_params(params: QueryParams) -> str:
    """Encode ``params`` as ``key=value`` pairs joined by ``&``.

    Keys and values are percent-encoded with no safe characters, so ``/`` and
    ``:`` in timestamps or identifiers are escaped as well.
    """
    return urlencode({str(k): _query_value(v) for k, v in params.items()}, quote_via=quote)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_uri(uri: str, params: QueryParams | None = None) -> str:
    """Append ``params`` to ``uri``, respecting an existing query component."""
    if not params:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{query_params(params)}"


def build_headers(token: str | None = None, headers: Mapping[str, str] | None = None) -> dict[str, str]:
    """Build request headers.

    The ``Authorization`` header carries the raw token without a scheme prefix.
    ``Content-Type`` is always JSON.
    """
    result: dict[str, str] = dict(headers or {})
    if token:
        result["Authorization"] = token
    result["Content-Type"] = JSON_CONTENT_TYPE
    return result


async def send_request(  # noqa: PLR0913 (mirrors the request options)
    client: httpx.AsyncClient,
    method: str,
    uri: str,
    *,
    token: str | None = None,
    params: QueryParams | None = None,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
) -> httpx.Response:
    """Perform exactly one HTTP request and return the successful response.

    Args:
        client: The HTTP client to send the request with.
        method: HTTP method name.
        uri: Absolute request URI.
        token: Bearer token for the ``Authorization`` header, if any.
        params: Query parameters appended to ``uri``.
        body: JSON-serialisable request body, sent for POST and PUT only.
        headers: Extra request headers.

    Returns:
        The HTTP response.

    Raises:
        httpx.HTTPStatusError: On a non-2xx response.
        httpx.HTTPError: On transport failures.

    """
    method = method.upper()
    url = build_uri(uri, params)
    request_kwargs: dict[str, Any] = {"headers": build_headers(token, headers)}
    if method in BODY_METHODS:
        request_kwargs["json"] = body

    logger.debug("%s %s", method, url)
    response = await client.request(method, url, **request_kwargs)
    logger.debug("%s %s -> %s", method, url, response.status_code)
    response.raise_for_status()
    return response


def parse_json(response: httpx.Response) -> Any:
    """Return the parsed JSON body, or ``None`` for an empty body."""
    if not response.content:
        return None
    return response.json()


async def request_json(  # noqa: PLR0913 (mirrors the request options)
    client: httpx.AsyncClient,
    method: str,
    uri: str,
    *,
    token: str | None = None,
    params: QueryParams | None = None,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
) -> Any:
    """Perform one request and resolve with the parsed JSON body only."""
    response = await send_request(
        client,
        method,
        uri,
        token=token,
        params=params,
        body=body,
        headers=headers,
    )
    return parse_json(response)


async def request_json_with_next_page(
    client: httpx.AsyncClient,
    method: str,
    uri: str,
    *,
    token: str | None = None,
    params: QueryParams | None = None,
) -> tuple[Any, str | None]:
    """Perform one request and resolve with the parsed body and ``next_page`` header."""
    response = await send_request(client, method, uri, token=token, params=params)
    return parse_json(response), response.headers.get(NEXT_PAGE_HEADER)


__all__ = [
    "JSON_CONTENT_TYPE",
    "NEXT_PAGE_HEADER",
    "QueryParams",
    "build_headers",
    "build_uri",
    "create_http_client",
    "parse_json",
    "query_params",
    "request_json",
    "request_json_with_next_page",
    "send_request",
]
