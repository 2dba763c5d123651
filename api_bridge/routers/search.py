"""
Search and document fetch routes.

Exposes keyword search over stored configurations and request history, and
fetches the synthesized document behind a search result id.
"""

from fastapi import APIRouter, Depends, Query

from ..context import ServiceContext, get_context
from ..schemas.search import Document, SearchResponse
from ..services.search import fetch_document, search


router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search", response_model=SearchResponse)
def search_documents(
    query: str = Query(default=""),
    ctx: ServiceContext = Depends(get_context)
):
    """
    Search configurations and history endpoints.

    Args:
        query: Free text, matched case-insensitively as a substring
        ctx: Service context

    Returns:
        Ranked results with id, title and url
    """
    return SearchResponse(results=search(ctx, query))


@router.get("/documents/{document_id}", response_model=Document)
def fetch(document_id: str, ctx: ServiceContext = Depends(get_context)):
    """
    Fetch the document behind a search result id.

    Raises:
        DocumentNotFoundError: 404 if the id is unknown or no longer backed by data
    """
    return fetch_document(ctx, document_id)
