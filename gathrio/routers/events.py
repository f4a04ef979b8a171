"""Events router."""

import logging
from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gathrio.core.dependencies import (
    get_current_user,
    get_event_service,
    get_optional_user,
    require_role,
)
from gathrio.core.events import (
    DEFAULT_FEATURED_LIMIT,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    EventFilters,
    EventService,
)
from gathrio.core.exceptions import EventNotFound
from gathrio.core.tokens import TokenIdentity
from gathrio.models.event import Event, EventStatus
from gathrio.models.user import UserRole
from gathrio.schemas.auth import MessageResponse
from gathrio.schemas.event import (
    EventCreate,
    EventListResponse,
    EventResponse,
    EventStatusValue,
    EventTypeValue,
    EventUpdate,
    OrganizerSummary,
    TicketTypeResponse,
    isoformat_utc,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])

require_organizer = require_role(UserRole.ORGANIZER.value, UserRole.ADMIN.value)


def event_response(event: Event) -> EventResponse:
    """Serialize an event with its ticket types and organizer summary."""
    organizer = None
    if event.organizer is not None:
        organizer = OrganizerSummary(
            id=str(event.organizer.id),
            first_name=event.organizer.first_name,
            last_name=event.organizer.last_name,
        )

    return EventResponse(
        id=str(event.id),
        organizer_id=str(event.organizer_id),
        organizer=organizer,
        title=event.title,
        description=event.description,
        event_type=event.event_type,
        category=event.category,
        start_time=isoformat_utc(event.start_time),
        end_time=isoformat_utc(event.end_time),
        timezone=event.timezone,
        venue_name=event.venue_name,
        venue_address=event.venue_address,
        venue_latitude=event.venue_latitude,
        venue_longitude=event.venue_longitude,
        max_in_person_capacity=event.max_in_person_capacity,
        max_virtual_capacity=event.max_virtual_capacity,
        banner_image_url=event.banner_image_url,
        status=event.status,
        is_featured=event.is_featured,
        ticket_types=[
            TicketTypeResponse(
                id=str(ticket_type.id),
                name=ticket_type.name,
                description=ticket_type.description,
                attendance_mode=ticket_type.attendance_mode,
                price=float(ticket_type.price),
                quantity_available=ticket_type.quantity_available,
                sale_start_time=isoformat_utc(ticket_type.sale_start_time),
                sale_end_time=isoformat_utc(ticket_type.sale_end_time),
            )
            for ticket_type in event.ticket_types
        ],
        created_at=isoformat_utc(event.created_at),
        updated_at=isoformat_utc(event.updated_at),
    )


def _parse_uuid(value: str, label: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID format",
        )


@router.get("/featured", response_model=list[EventResponse])
async def list_featured_events(
    event_service: Annotated[EventService, Depends(get_event_service)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_FEATURED_LIMIT,
) -> list[EventResponse]:
    """List upcoming featured events."""
    return [event_response(event) for event in event_service.list_featured_events(limit)]


@router.get("/my-events", response_model=list[EventResponse])
async def list_my_events(
    current_user: Annotated[TokenIdentity, Depends(get_current_user)],
    event_service: Annotated[EventService, Depends(get_event_service)],
) -> list[EventResponse]:
    """List all events organized by the current user, in any status.

    Args:
        current_user: Current authenticated user
        event_service: Event service

    Returns:
        List of EventResponse: User's events, newest first
    """
    organizer_id = _parse_uuid(current_user.user_id, "user")
    events = event_service.list_organizer_events(organizer_id)
    logger.info(f"Retrieved {len(events)} events for organizer {organizer_id}")
    return [event_response(event) for event in events]


@router.get("", response_model=EventListResponse)
async def list_events(
    event_service: Annotated[EventService, Depends(get_event_service)],
    category: str | None = None,
    event_type: EventTypeValue | None = None,
    event_status: Annotated[EventStatusValue, Query(alias="status")] = "published",
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    search: str | None = None,
    location: str | None = None,
    is_featured: bool | None = None,
    min_price: Annotated[float | None, Query(ge=0)] = None,
    max_price: Annotated[float | None, Query(ge=0)] = None,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> EventListResponse:
    """Browse and search events.

    Returns:
        EventListResponse: Matching events with the total count for pagination
    """
    page = event_service.list_events(
        EventFilters(
            category=category,
            event_type=event_type,
            status=event_status,
            start_date=start_date,
            end_date=end_date,
            search=search,
            location=location,
            is_featured=is_featured,
            min_price=min_price,
            max_price=max_price,
            limit=limit,
            offset=offset,
        )
    )
    return EventListResponse(
        events=[event_response(event) for event in page.events],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    current_user: Annotated[TokenIdentity | None, Depends(get_optional_user)],
    event_service: Annotated[EventService, Depends(get_event_service)],
) -> EventResponse:
    """Get a specific event by ID.

    Draft events are only visible to their organizer.

    Raises:
        HTTPException: If the ID is malformed
        EventNotFound: If the event does not exist or is a draft of another organizer
    """
    event = event_service.get_event(_parse_uuid(event_id, "event"))
    if event.status == EventStatus.DRAFT.value and (
        current_user is None or current_user.user_id != str(event.organizer_id)
    ):
        raise EventNotFound()
    return event_response(event)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: Annotated[TokenIdentity, Depends(require_organizer)],
    event_service: Annotated[EventService, Depends(get_event_service)],
) -> EventResponse:
    """Create a new event with its ticket types.

    Only organizer and admin accounts may create events; any other
    authenticated role is answered with 403.

    Args:
        event_data: Event creation data
        current_user: Current authenticated organizer
        event_service: Event service

    Returns:
        EventResponse: Created event
    """
    event = event_service.create_event(_parse_uuid(current_user.user_id, "user"), event_data)
    return event_response(event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    current_user: Annotated[TokenIdentity, Depends(get_current_user)],
    event_service: Annotated[EventService, Depends(get_event_service)],
) -> EventResponse:
    """Update an event.

    Raises:
        EventNotFound: If the event does not exist
        NotEventOwner: If the current user does not organize the event
    """
    event = event_service.update_event(
        _parse_uuid(event_id, "event"),
        _parse_uuid(current_user.user_id, "user"),
        event_data,
    )
    return event_response(event)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    current_user: Annotated[TokenIdentity, Depends(get_current_user)],
    event_service: Annotated[EventService, Depends(get_event_service)],
) -> MessageResponse:
    """Delete an event.

    Raises:
        EventNotFound: If the event does not exist
        NotEventOwner: If the current user does not organize the event
    """
    message = event_service.delete_event(
        _parse_uuid(event_id, "event"),
        _parse_uuid(current_user.user_id, "user"),
    )
    return MessageResponse(message=message)
