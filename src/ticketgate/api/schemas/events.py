"""Event catalogue schemas."""

from __future__ import annotations

from pydantic import Field

from ticketgate.api.schemas.common import CamelModel, PaginationMeta


class TierResponse(CamelModel):
    """One priced tier of an event."""

    id: int
    name: str
    price: str
    price_per_person: str
    max_supply: int
    current_supply: int
    available: int
    token_type: str
    active: bool


class EventResponse(CamelModel):
    """Event summary as listed in the catalogue."""

    id: int
    organizer: str
    title: str
    description: str
    location: str
    start_date: int
    end_date: int
    metadata_uri: str = Field(alias="metadataURI")
    active: bool
    tier_count: int
    status: str


class EventDetailResponse(EventResponse):
    """Event with all of its tiers."""

    tiers: list[TierResponse] = []


class EventListResponse(CamelModel):
    """One page of active events, newest first."""

    items: list[EventResponse]
    pagination: PaginationMeta
    blockchain_verified: bool = True
