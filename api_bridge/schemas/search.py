"""
Pydantic schemas for the search and document fetch interface.
"""

from typing import Any

from pydantic import BaseModel


class SearchResult(BaseModel):
    id: str
    title: str
    url: str


class SearchResponse(BaseModel):
    results: list[SearchResult]


class Document(BaseModel):
    """A synthesized, human-readable summary of a configuration or endpoint."""
    id: str
    title: str
    text: str
    url: str
    metadata: dict[str, Any] = {}
