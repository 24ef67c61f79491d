"""Event catalogue routes: /api/v1/events."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from ticketgate.api.deps import (
    PaginationParams,
    get_event_catalogue,
    get_pagination,
    parse_path_id,
)
from ticketgate.api.schemas.events import EventDetailResponse, EventListResponse
from ticketgate.services.events import CatalogueError, EventCatalogue

router = APIRouter(prefix="/api/v1/events", tags=["events"])


def _handle_catalogue_error(err: CatalogueError) -> None:
    """Convert CatalogueError to HTTPException."""
    raise HTTPException(status_code=err.status_code, detail=err.detail)


@router.get("", response_model=EventListResponse)
def list_events(
    pagination: PaginationParams = Depends(get_pagination),
    organizer: str | None = Query(default=None),
    catalogue: EventCatalogue = Depends(get_event_catalogue),
) -> dict[str, Any]:
    """List active events, newest first."""
    try:
        result = catalogue.list_events(
            page=pagination.page,
            limit=pagination.limit,
            organizer=organizer,
        )
    except CatalogueError as e:
        _handle_catalogue_error(e)
    return result


@router.get("/{event_id}", response_model=EventDetailResponse)
def get_event(
    event_id: str,
    catalogue: EventCatalogue = Depends(get_event_catalogue),
) -> dict[str, Any]:
    """Get one event with its tiers."""
    eid = parse_path_id(event_id, "Invalid event ID")
    try:
        result = catalogue.get_event(eid)
    except CatalogueError as e:
        _handle_catalogue_error(e)
    return result
