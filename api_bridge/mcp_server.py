"""
API Bridge MCP Server
=====================
Exposes the API Bridge operations as MCP tools and resources for agent
clients. Each server is built around its own service context.
"""

import json
from typing import Any, Callable, Dict

from loguru import logger
from pydantic import ValidationError

from .activity_log import configure_logging
from .config import Settings, get_settings
from .context import ServiceContext, build_context
from .exceptions import APIException, DependencyMissingError
from .schemas.api_config import ApiConfigCreate, AuthInput
from .schemas.execute import ExecuteErrorResponse, ExecuteRequest
from .services.http_executor import execute_request
from .services.search import fetch_document, search
from .services.stats_service import get_stats


TOOLS = [
    ("save_api", "Save a named API configuration (base URL, auth, default headers, timeout)"),
    ("make_request", "Send an HTTP request through a saved API configuration"),
    ("list_apis", "List saved API configurations, most recently used first"),
    ("get_api", "Show one saved API configuration with secrets redacted"),
    ("delete_api", "Delete a saved API configuration"),
    ("get_stats", "Usage statistics over the recent request history"),
    ("search", "Search saved APIs and previously called endpoints"),
    ("fetch", "Fetch the full document for a search result id"),
]

RESOURCES = [
    ("status://server", "Server Status", "Current status and usage statistics"),
    ("info://capabilities", "Server Capabilities", "Available tools and resources"),
    ("logs://recent", "Recent Logs", "Recent server activity"),
]


def _result_ok(data: Any) -> Dict[str, Any]:
    return {"ok": True, "data": data}


def _result_error(message: str) -> Dict[str, Any]:
    return {"ok": False, "error": message}


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = " -> ".join(str(part) for part in error["loc"])
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts) or "Validation error"


def with_error_handling(call: Callable[[], Any]) -> Dict[str, Any]:
    try:
        return _result_ok(call())
    except APIException as exc:
        return _result_error(exc.detail)
    except ValidationError as exc:
        return _result_error(_validation_message(exc))


def not_found_document(document_id: str, message: str) -> Dict[str, Any]:
    return {
        "id": document_id,
        "title": "Document not found",
        "text": message,
        "url": "",
        "metadata": {"error": message},
    }


def build_server(ctx: ServiceContext | None = None):
    ctx = ctx or build_context(get_settings())
    settings = ctx.settings

    try:
        from mcp.server.fastmcp import FastMCP
    except ImportError as exc:
        raise DependencyMissingError(
            dependency="mcp",
            message="Install package 'mcp' to run the MCP server."
        ) from exc

    server = FastMCP(settings.app_name, host=settings.mcp_host, port=settings.mcp_port)

    @server.tool(name="save_api")
    def save_api(
        name: str,
        base_url: str,
        description: str | None = None,
        auth: Dict[str, Any] | None = None,
        headers: Dict[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> Dict[str, Any]:
        """Save a named API configuration. auth.type is one of none, bearer, api_key, basic."""
        logger.info("Tool called: save_api for '{}'", name)

        def call():
            data = ApiConfigCreate(
                name=name,
                base_url=base_url,
                description=description,
                auth=AuthInput(**(auth or {})),
                headers=headers or {},
                timeout_ms=timeout_ms,
            )
            ctx.store.save(data)
            return ctx.store.render(name).model_dump(mode="json")

        return with_error_handling(call)

    @server.tool(name="make_request")
    async def make_request(
        api_name: str,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        query_params: Dict[str, Any] | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Dict[str, Any]:
        """Send an HTTP request through a saved API configuration."""
        logger.info("Tool called: make_request {} {} via '{}'", method, endpoint, api_name)
        try:
            request = ExecuteRequest(
                endpoint=endpoint,
                method=method.upper(),
                body=body,
                query_params=query_params or {},
                headers=headers or {},
            )
            result = await execute_request(
                ctx,
                api_name=api_name,
                endpoint=request.endpoint,
                method=request.method,
                body=request.body,
                query_params=request.query_params,
                headers=request.headers,
            )
        except APIException as exc:
            return _result_error(exc.detail)
        except ValidationError as exc:
            return _result_error(_validation_message(exc))

        if isinstance(result, ExecuteErrorResponse):
            return {"ok": False, "error": result.error, "data": result.model_dump(mode="json")}
        return _result_ok(result.model_dump(mode="json"))

    @server.tool(name="list_apis")
    def list_apis() -> Dict[str, Any]:
        """List saved API configurations, most recently used first."""
        logger.info("Tool called: list_apis")
        return with_error_handling(
            lambda: [summary.model_dump(mode="json") for summary in ctx.store.list()]
        )

    @server.tool(name="get_api")
    def get_api(name: str) -> Dict[str, Any]:
        """Show one saved API configuration with secrets redacted."""
        logger.info("Tool called: get_api for '{}'", name)
        return with_error_handling(lambda: ctx.store.render(name).model_dump(mode="json"))

    @server.tool(name="delete_api")
    def delete_api(name: str) -> Dict[str, Any]:
        """Delete a saved API configuration."""
        logger.info("Tool called: delete_api for '{}'", name)

        def call():
            ctx.store.delete(name)
            return {"deleted": name}

        return with_error_handling(call)

    @server.tool(name="get_stats")
    def get_stats_tool() -> Dict[str, Any]:
        """Usage statistics over the recent request history."""
        logger.info("Tool called: get_stats")
        return with_error_handling(lambda: get_stats(ctx).model_dump(mode="json"))

    @server.tool(name="search")
    def search_tool(query: str) -> Dict[str, Any]:
        """Search saved APIs and previously called endpoints."""
        logger.info("Tool called: search for '{}'", query)
        return {"results": [result.model_dump() for result in search(ctx, query)]}

    @server.tool(name="fetch")
    def fetch_tool(id: str) -> Dict[str, Any]:
        """Fetch the full document for a search result id."""
        logger.info("Tool called: fetch for '{}'", id)
        try:
            return fetch_document(ctx, id).model_dump(mode="json")
        except APIException as exc:
            return not_found_document(id, exc.detail)

    @server.resource("status://server", mime_type="application/json")
    def server_status() -> str:
        """Current status and usage statistics."""
        logger.info("Resource accessed: status://server")
        status = {
            "status": "healthy",
            "version": settings.version,
            "uptime_seconds": ctx.uptime_seconds,
            "stats": get_stats(ctx).model_dump(mode="json", exclude={"last_10"}),
            "tools_count": len(TOOLS),
            "resources_count": len(RESOURCES),
        }
        return json.dumps(status, indent=2)

    @server.resource("info://capabilities", mime_type="application/json")
    def server_capabilities() -> str:
        """Available tools and resources."""
        logger.info("Resource accessed: info://capabilities")
        capabilities = {
            "server": {"name": settings.app_name, "version": settings.version},
            "tools": [{"name": name, "description": text} for name, text in TOOLS],
            "resources": [
                {"uri": uri, "name": name, "description": text} for uri, name, text in RESOURCES
            ],
        }
        return json.dumps(capabilities, indent=2)

    @server.resource("logs://recent", mime_type="text/plain")
    def recent_logs() -> str:
        """Recent server activity."""
        logger.info("Resource accessed: logs://recent")
        return "\n".join(ctx.activity_log.recent(20)) or "No recent activity"

    return server


def main(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    ctx = build_context(settings)
    # stdio carries the protocol on stdout; logs stay in the activity log and stderr
    configure_logging(ctx.activity_log, level=settings.log_level)

    server = build_server(ctx)
    logger.info("Starting MCP server ({})", settings.mcp_transport)
    server.run(transport=settings.mcp_transport)


if __name__ == "__main__":
    main()
