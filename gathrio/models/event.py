"""Event and ticket type models."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from gathrio.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventType(str, Enum):
    """How an event is attended."""

    IN_PERSON = "in_person"
    VIRTUAL = "virtual"
    HYBRID = "hybrid"


class EventStatus(str, Enum):
    """Publication status of an event."""

    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class AttendanceMode(str, Enum):
    """Attendance mode a ticket type grants."""

    IN_PERSON = "in_person"
    VIRTUAL = "virtual"


class Event(Base):
    """Event created by an organizer."""

    __tablename__ = "events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    organizer_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(String(20), default=EventType.IN_PERSON.value, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    timezone = Column(String(64), default="UTC", nullable=False)
    venue_name = Column(String(255), nullable=True)
    venue_address = Column(String(500), nullable=True)
    venue_latitude = Column(Float, nullable=True)
    venue_longitude = Column(Float, nullable=True)
    max_in_person_capacity = Column(Integer, nullable=True)
    max_virtual_capacity = Column(Integer, nullable=True)
    banner_image_url = Column(String(1000), nullable=True)
    status = Column(String(20), default=EventStatus.PUBLISHED.value, nullable=False, index=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    # Relationships
    organizer = relationship("User", backref="events")
    ticket_types = relationship(
        "TicketType",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="TicketType.created_at",
    )

    def __repr__(self) -> str:
        """String representation of Event."""
        return f"<Event(id={self.id}, title={self.title}, organizer_id={self.organizer_id})>"


class TicketType(Base):
    """Ticket tier offered for an event."""

    __tablename__ = "ticket_types"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    event_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    attendance_mode = Column(String(20), default=AttendanceMode.IN_PERSON.value, nullable=False)
    price = Column(Numeric(10, 2), default=0, nullable=False)
    quantity_available = Column(Integer, nullable=False)
    sale_start_time = Column(DateTime(timezone=True), nullable=True)
    sale_end_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    event = relationship("Event", back_populates="ticket_types")

    def __repr__(self) -> str:
        """String representation of TicketType."""
        return f"<TicketType(id={self.id}, name={self.name}, price={self.price})>"
