"""
API configuration routes.

Provides save, list, get and delete operations for named API configurations,
plus execution of requests through a stored configuration. Responses never
include secret credential values.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..context import ServiceContext, get_context
from ..schemas.api_config import ApiConfigCreate, ApiConfigResponse, ApiSummary
from ..schemas.execute import ExecuteErrorResponse, ExecuteRequest, ExecuteResponse
from ..services.http_executor import execute_request


router = APIRouter(prefix="/api/apis", tags=["apis"])


# Error types mapped to gateway status codes
ERROR_STATUS_CODES = {
    "timeout": status.HTTP_504_GATEWAY_TIMEOUT,
    "network_error": status.HTTP_502_BAD_GATEWAY,
    "invalid_url": status.HTTP_502_BAD_GATEWAY,
    "unknown": status.HTTP_502_BAD_GATEWAY,
}


@router.post("", response_model=ApiConfigResponse, status_code=status.HTTP_201_CREATED)
def save_api(data: ApiConfigCreate, ctx: ServiceContext = Depends(get_context)):
    """
    Save a new API configuration.

    Args:
        data: Name, base URL, auth and defaults for the configuration
        ctx: Service context

    Returns:
        The stored configuration with secrets redacted

    Raises:
        AlreadyExistsError: 409 if the name is taken
        InvalidUrlError: 422 if base_url is not an absolute http(s) URL
        IncompleteAuthError: 422 if credentials required by the auth type are missing
    """
    config = ctx.store.save(data)
    return ApiConfigResponse.from_config(config)


@router.get("", response_model=list[ApiSummary])
def list_apis(ctx: ServiceContext = Depends(get_context)):
    """List configuration summaries, most recently used first."""
    return ctx.store.list()


@router.get("/{name}", response_model=ApiConfigResponse)
def get_api(name: str, ctx: ServiceContext = Depends(get_context)):
    """
    Get a configuration by name with secrets redacted.

    Raises:
        ApiNotFoundError: 404 if no configuration has this name
    """
    return ctx.store.render(name)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_api(name: str, ctx: ServiceContext = Depends(get_context)):
    """
    Delete a configuration by name. Its history records are kept.

    Raises:
        ApiNotFoundError: 404 if no configuration has this name
    """
    ctx.store.delete(name)
    return None


@router.post(
    "/{name}/requests",
    response_model=ExecuteResponse,
    responses={
        200: {"model": ExecuteResponse, "description": "Response received (any HTTP status)"},
        502: {"model": ExecuteErrorResponse, "description": "Network error"},
        504: {"model": ExecuteErrorResponse, "description": "Request timeout"},
    }
)
async def make_request(
    name: str,
    request: ExecuteRequest,
    ctx: ServiceContext = Depends(get_context)
):
    """
    Execute an HTTP request through a stored configuration.

    The remote status code is reported in the body; this endpoint returns
    200 whenever the remote API answered, including 4xx/5xx answers.

    Args:
        name: Configuration to call through
        request: Endpoint, method, body, query parameters and headers
        ctx: Service context

    Returns:
        ExecuteResponse on any HTTP response
        ExecuteErrorResponse with 504/502 when no response arrived

    Raises:
        ApiNotFoundError: 404 if no configuration has this name
    """
    result = await execute_request(
        ctx,
        api_name=name,
        endpoint=request.endpoint,
        method=request.method,
        body=request.body,
        query_params=request.query_params,
        headers=request.headers,
    )

    if isinstance(result, ExecuteErrorResponse):
        return JSONResponse(
            status_code=ERROR_STATUS_CODES[result.error_type],
            content=result.model_dump(),
        )

    return result
