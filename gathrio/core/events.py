"""Event management: creation, filtered listing, and organizer updates."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session, selectinload

from gathrio.core.exceptions import EventNotFound, NotEventOwner, ValidationError
from gathrio.models.event import Event, EventStatus, TicketType
from gathrio.schemas.event import EventCreate, EventUpdate, as_utc

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_FEATURED_LIMIT = 6

# Columns an update may not set to NULL; an explicit null leaves them unchanged
_NON_NULLABLE_FIELDS = frozenset(
    {"title", "event_type", "start_time", "end_time", "timezone", "status", "is_featured"}
)


@dataclass
class EventFilters:
    """Filters accepted by ``EventService.list_events``."""

    category: str | None = None
    event_type: str | None = None
    status: str = EventStatus.PUBLISHED.value
    start_date: datetime | None = None
    end_date: datetime | None = None
    search: str | None = None
    location: str | None = None
    is_featured: bool | None = None
    min_price: float | None = None
    max_price: float | None = None
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0


@dataclass
class EventPage:
    """One page of a filtered event listing."""

    events: list[Event]
    total: int
    limit: int
    offset: int


class EventService:
    """Event operations against the database."""

    def __init__(self, db: Session):
        self.db = db

    def create_event(self, organizer_id: UUID, data: EventCreate) -> Event:
        """Create an event together with its ticket types.

        Args:
            organizer_id: ID of the organizing user
            data: Validated event creation data

        Returns:
            Event: The persisted event
        """
        now = datetime.now(timezone.utc)
        event = Event(
            id=uuid4(),
            organizer_id=organizer_id,
            created_at=now,
            updated_at=now,
            **data.model_dump(exclude={"ticket_types"}),
        )
        # ticket_types is ordered by created_at; offset each tier to keep request order
        event.ticket_types = [
            TicketType(id=uuid4(), created_at=now + timedelta(microseconds=index), **ticket_type.model_dump())
            for index, ticket_type in enumerate(data.ticket_types)
        ]

        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Created event {event.id} with {len(event.ticket_types)} ticket types for organizer {organizer_id}")
        return event

    def list_events(self, filters: EventFilters) -> EventPage:
        """List events matching the filters, featured first then soonest first.

        ``search`` matches title, description, or category; ``location``
        matches venue name or address. Both are case-insensitive substring
        matches and must each hold when given. The price range matches events
        with at least one ticket type inside it.
        """
        limit = max(1, min(filters.limit, MAX_PAGE_SIZE))
        offset = max(0, filters.offset)

        query = self.db.query(Event).filter(Event.status == filters.status)

        if filters.category:
            query = query.filter(Event.category == filters.category)
        if filters.event_type:
            query = query.filter(Event.event_type == filters.event_type)
        if filters.is_featured is not None:
            query = query.filter(Event.is_featured == filters.is_featured)
        if filters.start_date:
            query = query.filter(Event.start_time >= as_utc(filters.start_date))
        if filters.end_date:
            query = query.filter(Event.start_time <= as_utc(filters.end_date))
        if filters.search:
            query = query.filter(
                or_(
                    Event.title.icontains(filters.search, autoescape=True),
                    Event.description.icontains(filters.search, autoescape=True),
                    Event.category.icontains(filters.search, autoescape=True),
                )
            )
        if filters.location:
            query = query.filter(
                or_(
                    Event.venue_name.icontains(filters.location, autoescape=True),
                    Event.venue_address.icontains(filters.location, autoescape=True),
                )
            )
        if filters.min_price is not None or filters.max_price is not None:
            price_conditions = []
            if filters.min_price is not None:
                price_conditions.append(TicketType.price >= filters.min_price)
            if filters.max_price is not None:
                price_conditions.append(TicketType.price <= filters.max_price)
            query = query.filter(Event.ticket_types.any(and_(*price_conditions)))

        total = query.count()
        events = (
            self._with_relations(query)
            .order_by(Event.is_featured.desc(), Event.start_time.asc())
            .limit(limit)
            .offset(offset)
            .all()
        )

        return EventPage(events=events, total=total, limit=limit, offset=offset)

    def get_event(self, event_id: UUID) -> Event:
        """Get an event by ID.

        Raises:
            EventNotFound: If the event does not exist
        """
        event = self._with_relations(self.db.query(Event)).filter(Event.id == event_id).first()
        if event is None:
            raise EventNotFound()
        return event

    def update_event(self, event_id: UUID, user_id: UUID, data: EventUpdate) -> Event:
        """Apply the fields set on ``data`` to an event the user organizes.

        Raises:
            EventNotFound: If the event does not exist
            NotEventOwner: If the user is not the event's organizer
            ValidationError: If the resulting end time precedes the start time
        """
        event = self._get_owned_event(event_id, user_id, action="update")

        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        for field, value in list(changes.items()):
            if value is None and field in _NON_NULLABLE_FIELDS:
                del changes[field]
                continue
            setattr(event, field, value)

        if as_utc(event.end_time) < as_utc(event.start_time):
            self.db.rollback()
            raise ValidationError(["End time must be after start time"])

        event.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Updated event {event.id} fields {sorted(changes)}")
        return event

    def delete_event(self, event_id: UUID, user_id: UUID) -> str:
        """Delete an event the user organizes, with its ticket types.

        Raises:
            EventNotFound: If the event does not exist
            NotEventOwner: If the user is not the event's organizer
        """
        event = self._get_owned_event(event_id, user_id, action="delete")
        self.db.delete(event)
        self.db.commit()

        logger.info(f"Deleted event {event_id} by organizer {user_id}")
        return "Event deleted successfully"

    def list_organizer_events(self, organizer_id: UUID) -> list[Event]:
        """List every event of one organizer, newest first, in any status."""
        return (
            self._with_relations(self.db.query(Event))
            .filter(Event.organizer_id == organizer_id)
            .order_by(Event.created_at.desc())
            .all()
        )

    def list_featured_events(self, limit: int = DEFAULT_FEATURED_LIMIT) -> list[Event]:
        """List upcoming published featured events, soonest first."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        return (
            self._with_relations(self.db.query(Event))
            .filter(
                Event.is_featured.is_(True),
                Event.status == EventStatus.PUBLISHED.value,
                Event.start_time >= datetime.now(timezone.utc),
            )
            .order_by(Event.start_time.asc())
            .limit(limit)
            .all()
        )

    def _get_owned_event(self, event_id: UUID, user_id: UUID, action: str) -> Event:
        event = self.db.query(Event).filter(Event.id == event_id).first()
        if event is None:
            raise EventNotFound()
        if event.organizer_id != user_id:
            raise NotEventOwner(f"Unauthorized: You can only {action} your own events")
        return event

    @staticmethod
    def _with_relations(query: Query) -> Query:
        return query.options(selectinload(Event.ticket_types), selectinload(Event.organizer))
