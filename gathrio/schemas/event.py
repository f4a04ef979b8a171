"""Event schemas."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EventTypeValue = Literal["in_person", "virtual", "hybrid"]
EventStatusValue = Literal["draft", "published", "cancelled", "completed"]
AttendanceModeValue = Literal["in_person", "virtual"]


def as_utc(v: datetime | None) -> datetime | None:
    """Normalize a datetime to UTC, treating naive values as UTC already."""
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


def isoformat_utc(v: datetime | None) -> str | None:
    """Render a stored datetime as ISO 8601 with an explicit UTC offset."""
    v = as_utc(v)
    return v.isoformat() if v is not None else None


def _strip_optional(v: str | None) -> str | None:
    if isinstance(v, str):
        return v.strip() or None
    return v


class TicketTypeCreate(BaseModel):
    """Ticket type creation schema, nested in event creation."""

    name: str
    description: str | None = None
    attendance_mode: AttendanceModeValue = "in_person"
    price: float = Field(ge=0)
    quantity_available: int = Field(ge=0)
    sale_start_time: datetime | None = None
    sale_end_time: datetime | None = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize name by stripping whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Ticket type name is required")
        return v

    @field_validator("sale_start_time", "sale_end_time")
    @classmethod
    def normalize_times(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class EventCreate(BaseModel):
    """Event creation request schema."""

    title: str
    description: str | None = None
    event_type: EventTypeValue = "in_person"
    category: str | None = None
    start_time: datetime
    end_time: datetime
    timezone: str = "UTC"
    venue_name: str | None = None
    venue_address: str | None = None
    venue_latitude: float | None = Field(default=None, ge=-90, le=90)
    venue_longitude: float | None = Field(default=None, ge=-180, le=180)
    max_in_person_capacity: int | None = Field(default=None, ge=0)
    max_virtual_capacity: int | None = Field(default=None, ge=0)
    banner_image_url: str | None = None
    status: EventStatusValue = "published"
    ticket_types: list[TicketTypeCreate]

    @field_validator("title", mode="before")
    @classmethod
    def normalize_title(cls, v: str) -> str:
        """Normalize title by stripping whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("title")
    @classmethod
    def require_title(cls, v: str) -> str:
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description", "category", "venue_name", "venue_address", "banner_image_url", mode="before")
    @classmethod
    def normalize_optional_text(cls, v: str | None) -> str | None:
        """Treat blank optional strings as absent."""
        return _strip_optional(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("ticket_types")
    @classmethod
    def require_ticket_types(cls, v: list[TicketTypeCreate]) -> list[TicketTypeCreate]:
        if not v:
            raise ValueError("At least one ticket type is required")
        return v

    @model_validator(mode="after")
    def check_time_range(self) -> "EventCreate":
        if self.end_time < self.start_time:
            raise ValueError("End time must be after start time")
        return self


class EventUpdate(BaseModel):
    """Event update request schema. Only fields that are sent get changed."""

    title: str | None = None
    description: str | None = None
    event_type: EventTypeValue | None = None
    category: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    venue_latitude: float | None = Field(default=None, ge=-90, le=90)
    venue_longitude: float | None = Field(default=None, ge=-180, le=180)
    max_in_person_capacity: int | None = Field(default=None, ge=0)
    max_virtual_capacity: int | None = Field(default=None, ge=0)
    banner_image_url: str | None = None
    status: EventStatusValue | None = None
    is_featured: bool | None = None

    @field_validator("title", mode="before")
    @classmethod
    def normalize_title(cls, v: str | None) -> str | None:
        """Normalize title by stripping whitespace."""
        if v is None:
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("title")
    @classmethod
    def reject_blank_title(cls, v: str | None) -> str | None:
        if v is not None and not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class TicketTypeResponse(BaseModel):
    """Ticket type response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    attendance_mode: str
    price: float
    quantity_available: int
    sale_start_time: str | None
    sale_end_time: str | None


class OrganizerSummary(BaseModel):
    """Public organizer fields embedded in event responses."""

    id: str
    first_name: str
    last_name: str


class EventResponse(BaseModel):
    """Event response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    organizer_id: str
    organizer: OrganizerSummary | None
    title: str
    description: str | None
    event_type: str
    category: str | None
    start_time: str
    end_time: str
    timezone: str
    venue_name: str | None
    venue_address: str | None
    venue_latitude: float | None
    venue_longitude: float | None
    max_in_person_capacity: int | None
    max_virtual_capacity: int | None
    banner_image_url: str | None
    status: str
    is_featured: bool
    ticket_types: list[TicketTypeResponse]
    created_at: str
    updated_at: str


class EventListResponse(BaseModel):
    """Paginated event listing schema."""

    events: list[EventResponse]
    total: int
    limit: int
    offset: int
