"""
HTTP execution service for calls through stored API configurations.

This service resolves a configuration, builds the outbound URL and headers,
sends the request with httpx under the configuration's deadline, classifies
the response body, and records the outcome in the history ledger.
"""

import asyncio
import json
import time
from datetime import datetime, timezone
from typing import Any, Mapping

import httpx
from loguru import logger
from pydantic import JsonValue

from ..context import ServiceContext
from ..models.history import TRANSPORT_FAILURE_STATUS, RequestRecord
from ..schemas.execute import ExecuteErrorResponse, ExecuteResponse
from .request_builder import build_headers, build_url


def parse_body(text: str, content_type: str | None) -> JsonValue:
    """
    Classify a response body as JSON or text.

    JSON content types are parsed; other ``text`` content types stay text;
    anything else is parsed as JSON when possible and kept as text otherwise.

    Args:
        text: Decoded response body
        content_type: Content-Type header value

    Returns:
        Parsed JSON value or the raw text
    """
    content_type = (content_type or "").lower()
    if "json" not in content_type and "text" in content_type:
        return text
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return text


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _record(
    ctx: ServiceContext,
    api_name: str,
    method: str,
    endpoint: str,
    status: int,
    response_time_ms: int,
) -> None:
    # Synchronous bookkeeping right after the await, so appends never interleave
    now = datetime.now(timezone.utc)
    ctx.store.touch(api_name, now)
    ctx.ledger.append(RequestRecord(
        timestamp=now,
        api_name=api_name,
        method=method,
        endpoint=endpoint,
        status=status,
        response_time_ms=response_time_ms,
    ))


def _failure(
    ctx: ServiceContext,
    api_name: str,
    method: str,
    endpoint: str,
    outcome: ExecuteErrorResponse,
) -> ExecuteErrorResponse:
    logger.warning(
        "{} {} via '{}' failed after {} ms: {}",
        method, endpoint, api_name, outcome.response_time_ms, outcome.error,
    )
    if ctx.settings.record_transport_failures:
        _record(ctx, api_name, method, endpoint, TRANSPORT_FAILURE_STATUS, outcome.response_time_ms)
    return outcome


async def execute_request(
    ctx: ServiceContext,
    api_name: str,
    endpoint: str,
    method: str = "GET",
    body: Any = None,
    query_params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> ExecuteResponse | ExecuteErrorResponse:
    """
    Execute an HTTP request through a stored configuration.

    Args:
        ctx: Service context
        api_name: Name of the configuration to call through
        endpoint: Endpoint path relative to the configuration's base URL
        method: HTTP method
        body: JSON-serializable body; ignored for GET
        query_params: Query parameters; ``None`` values are skipped
        headers: Per-call headers layered over the configuration defaults

    Returns:
        ExecuteResponse for any HTTP response, ExecuteErrorResponse when no
        response arrived (timeout, transport failure or unencodable header)

    Raises:
        ApiNotFoundError: If no configuration has this name
    """
    config = ctx.store.get(api_name)
    method = method.upper()

    url = build_url(config.base_url, endpoint, query_params)
    request_headers = build_headers(config, headers)

    content: str | None = None
    if method != "GET" and body is not None:
        content = json.dumps(body)

    timeout = config.timeout_ms / 1000

    start_time = time.perf_counter()
    try:
        async with httpx.AsyncClient(transport=ctx.transport, timeout=timeout) as client:
            response = await asyncio.wait_for(
                client.request(method=method, url=url, headers=request_headers, content=content),
                timeout=timeout,
            )
    except (asyncio.TimeoutError, httpx.TimeoutException):
        return _failure(ctx, api_name, method, endpoint, ExecuteErrorResponse(
            error="Request timed out",
            error_type="timeout",
            details=f"Request exceeded {config.timeout_ms} ms timeout",
            response_time_ms=_elapsed_ms(start_time),
        ))
    except httpx.InvalidURL as e:
        return _failure(ctx, api_name, method, endpoint, ExecuteErrorResponse(
            error="Invalid URL",
            error_type="invalid_url",
            details=str(e),
            response_time_ms=_elapsed_ms(start_time),
        ))
    except UnicodeEncodeError as e:
        # Header values must be ASCII on the wire
        return _failure(ctx, api_name, method, endpoint, ExecuteErrorResponse(
            error="Invalid header value",
            error_type="unknown",
            details=str(e),
            response_time_ms=_elapsed_ms(start_time),
        ))
    except httpx.ConnectError as e:
        return _failure(ctx, api_name, method, endpoint, ExecuteErrorResponse(
            error="Failed to connect to server",
            error_type="network_error",
            details=str(e),
            response_time_ms=_elapsed_ms(start_time),
        ))
    except httpx.HTTPError as e:
        return _failure(ctx, api_name, method, endpoint, ExecuteErrorResponse(
            error="HTTP error occurred",
            error_type="network_error",
            details=str(e),
            response_time_ms=_elapsed_ms(start_time),
        ))

    response_time_ms = _elapsed_ms(start_time)
    response_headers = dict(response.headers)
    response_body = parse_body(response.text, response.headers.get("content-type"))

    _record(ctx, api_name, method, endpoint, response.status_code, response_time_ms)
    logger.info(
        "{} {} via '{}' -> {} in {} ms",
        method, endpoint, api_name, response.status_code, response_time_ms,
    )

    return ExecuteResponse(
        status=response.status_code,
        status_text=response.reason_phrase or "",
        headers=response_headers,
        body=response_body,
        response_time_ms=response_time_ms,
    )
