"""
Keyword search and document fetch over configurations and history.

Search scores each stored configuration and each distinct
``(api_name, endpoint)`` pair seen in history against a free-text query.
Fetch turns a result id back into a readable document.

Document ids are built and read only through ``encode_document_id`` and
``parse_document_id``:

    api-<name>                          -> ApiDocument(name)
    endpoint-<name>-<sanitized endpoint> -> EndpointDocument(name, endpoint)

Endpoint ids are resolved by matching against the encoded key of every
distinct pair in history, so API names may themselves contain ``-``.
"""

import re
from dataclasses import dataclass
from typing import Union

from ..context import ServiceContext
from ..exceptions import DocumentNotFoundError
from ..models.api_config import ApiConfiguration
from ..models.history import RequestRecord
from ..schemas.search import Document, SearchResult
from .request_builder import build_url


API_PREFIX = "api-"
ENDPOINT_PREFIX = "endpoint-"

# Score contributions for a configuration
NAME_SCORE = 10
DESCRIPTION_SCORE = 5
BASE_URL_SCORE = 3
AUTH_TYPE_SCORE = 2
HISTORY_SCORE = 1

# Score contributions for a history endpoint
ENDPOINT_SCORE = 4
METHOD_SCORE = 2

RECENT_CALLS_IN_DOCUMENT = 5

_UNSAFE = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class ApiDocument:
    name: str


@dataclass(frozen=True)
class EndpointDocument:
    api_name: str
    endpoint: str


@dataclass(frozen=True)
class EndpointDocumentKey:
    """Unresolved endpoint id: everything after the ``endpoint-`` prefix."""
    key: str


DocumentId = Union[ApiDocument, EndpointDocument]


def sanitize_endpoint(endpoint: str) -> str:
    return _UNSAFE.sub("_", endpoint)


def endpoint_key(api_name: str, endpoint: str) -> str:
    return f"{api_name}-{sanitize_endpoint(endpoint)}"


def encode_document_id(document: DocumentId) -> str:
    if isinstance(document, ApiDocument):
        return f"{API_PREFIX}{document.name}"
    return f"{ENDPOINT_PREFIX}{endpoint_key(document.api_name, document.endpoint)}"


def parse_document_id(raw: str) -> ApiDocument | EndpointDocumentKey:
    """
    Read a document id produced by ``encode_document_id``.

    Raises:
        DocumentNotFoundError: If the id has no known prefix or an empty body
    """
    if raw.startswith(API_PREFIX) and len(raw) > len(API_PREFIX):
        return ApiDocument(raw[len(API_PREFIX):])
    if raw.startswith(ENDPOINT_PREFIX) and len(raw) > len(ENDPOINT_PREFIX):
        return EndpointDocumentKey(raw[len(ENDPOINT_PREFIX):])
    raise DocumentNotFoundError(raw)


def _distinct_endpoints(records: list[RequestRecord]) -> dict[tuple[str, str], list[RequestRecord]]:
    pairs: dict[tuple[str, str], list[RequestRecord]] = {}
    for record in records:
        pairs.setdefault((record.api_name, record.endpoint), []).append(record)
    return pairs


def _api_title(config: ApiConfiguration) -> str:
    if config.description:
        return f"{config.name} API - {config.description}"
    return f"{config.name} API"


def _endpoint_url(ctx: ServiceContext, api_name: str, endpoint: str) -> str:
    if api_name in ctx.store:
        return build_url(ctx.store.get(api_name).base_url, endpoint)
    return endpoint


def _score_api(config: ApiConfiguration, query: str, history: list[RequestRecord]) -> int:
    score = 0
    if query in config.name.lower():
        score += NAME_SCORE
    if config.description and query in config.description.lower():
        score += DESCRIPTION_SCORE
    if query in config.base_url.lower():
        score += BASE_URL_SCORE
    if query in config.auth_type.lower():
        score += AUTH_TYPE_SCORE
    if any(
        record.api_name == config.name
        and (query in record.endpoint.lower() or query in record.method.lower())
        for record in history
    ):
        score += HISTORY_SCORE
    return score


def search(ctx: ServiceContext, query: str) -> list[SearchResult]:
    """
    Rank configurations and history endpoints against a query.

    Matching is a case-insensitive substring test. Results are ordered by
    score, or by title length when ``search_ordering`` is ``title_length``,
    and capped at ``search_result_limit``.
    """
    if not query.strip():
        return []
    needle = query.lower()

    history = list(ctx.ledger)
    scored: list[tuple[int, SearchResult]] = []

    for config in ctx.store:
        score = _score_api(config, needle, history)
        if score > 0:
            scored.append((score, SearchResult(
                id=encode_document_id(ApiDocument(config.name)),
                title=_api_title(config),
                url=config.base_url,
            )))

    for (api_name, endpoint), records in _distinct_endpoints(history).items():
        score = 0
        if needle in endpoint.lower():
            score += ENDPOINT_SCORE
        if any(needle in record.method.lower() for record in records):
            score += METHOD_SCORE
        if score > 0:
            scored.append((score, SearchResult(
                id=encode_document_id(EndpointDocument(api_name, endpoint)),
                title=f"{api_name} {endpoint}",
                url=_endpoint_url(ctx, api_name, endpoint),
            )))

    if ctx.settings.search_ordering == "title_length":
        scored.sort(key=lambda item: -len(item[1].title))
    else:
        scored.sort(key=lambda item: (-item[0], -len(item[1].title), item[1].title))

    return [result for _, result in scored[:ctx.settings.search_result_limit]]


def _usage(records: list[RequestRecord]) -> tuple[int, float, float]:
    count = len(records)
    if not count:
        return 0, 0.0, 0.0
    success_rate = round(sum(1 for r in records if r.success) / count * 100, 2)
    average = round(sum(r.response_time_ms for r in records) / count, 2)
    return count, success_rate, average


def _fetch_api(ctx: ServiceContext, raw_id: str, name: str) -> Document:
    if name not in ctx.store:
        raise DocumentNotFoundError(raw_id)
    config = ctx.store.get(name)
    records = ctx.ledger.filter(lambda r: r.api_name == name)
    count, success_rate, average = _usage(records)
    endpoints = _distinct_endpoints(records)

    lines = [
        f"API: {config.name}",
        f"Base URL: {config.base_url}",
        f"Description: {config.description or '(none)'}",
        f"Authentication: {config.auth_type}",
        f"Default headers: {', '.join(config.headers) or '(none)'}",
        f"Timeout: {config.timeout_ms} ms",
        f"Created: {config.created_at.isoformat()}",
        f"Last used: {config.last_used_at.isoformat() if config.last_used_at else 'never'}",
        "",
        "Usage statistics:",
        f"  Requests: {count}",
        f"  Success rate: {success_rate}%",
        f"  Average response time: {average} ms",
        "",
        "Endpoints:",
    ]
    if endpoints:
        for (_, endpoint), calls in endpoints.items():
            methods = ", ".join(sorted({call.method for call in calls}))
            lines.append(f"  {methods} {endpoint} ({len(calls)} calls)")
    else:
        lines.append("  (no requests recorded)")

    return Document(
        id=raw_id,
        title=_api_title(config),
        text="\n".join(lines),
        url=config.base_url,
        metadata={
            "type": "api",
            "name": config.name,
            "auth": config.redacted_auth(),
            "request_count": count,
            "success_rate": success_rate,
            "average_response_time_ms": average,
            "endpoints": [endpoint for _, endpoint in endpoints],
        },
    )


def _fetch_endpoint(ctx: ServiceContext, raw_id: str, key: str) -> Document:
    matches = {
        pair: calls
        for pair, calls in _distinct_endpoints(list(ctx.ledger)).items()
        if endpoint_key(*pair) == key
    }
    if not matches:
        raise DocumentNotFoundError(raw_id)

    # Distinct endpoints can sanitize to the same key; the document covers all of them
    api_name, endpoint = next(iter(matches))
    records = [call for calls in matches.values() for call in calls]
    records.sort(key=lambda r: r.timestamp)
    count, success_rate, average = _usage(records)
    methods = sorted({r.method for r in records})
    recent = list(reversed(records[-RECENT_CALLS_IN_DOCUMENT:]))

    lines = [
        f"Endpoint: {endpoint}",
        f"API: {api_name}",
        f"Methods seen: {', '.join(methods)}",
        "",
        "Statistics:",
        f"  Requests: {count}",
        f"  Success rate: {success_rate}%",
        f"  Average response time: {average} ms",
        "",
        "Recent calls:",
    ]
    for r in recent:
        outcome = "ok" if r.success else "failed"
        lines.append(
            f"  {r.timestamp.isoformat()} {r.method} {r.endpoint} -> {r.status} "
            f"({r.response_time_ms} ms, {outcome})"
        )

    return Document(
        id=raw_id,
        title=f"{api_name} {endpoint}",
        text="\n".join(lines),
        url=_endpoint_url(ctx, api_name, endpoint),
        metadata={
            "type": "endpoint",
            "api_name": api_name,
            "endpoint": endpoint,
            "methods": methods,
            "request_count": count,
            "success_rate": success_rate,
            "average_response_time_ms": average,
            "recent_calls": [r.model_dump(mode="json") for r in recent],
        },
    )


def fetch_document(ctx: ServiceContext, document_id: str) -> Document:
    """
    Build the document behind a search result id.

    Raises:
        DocumentNotFoundError: If the id is malformed or nothing backs it
    """
    parsed = parse_document_id(document_id)
    if isinstance(parsed, ApiDocument):
        return _fetch_api(ctx, document_id, parsed.name)
    return _fetch_endpoint(ctx, document_id, parsed.key)
