"""Shared schemas used across all entity schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationMeta(BaseModel):
    """Pagination metadata in list responses."""

    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next: bool = False
    has_prev: bool = False


class ErrorResponse(BaseModel):
    """RFC 7807 Problem Details error response."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    instance: str | None = None
    reason: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    environment: str
    ledger: str
    network: str | None = None
