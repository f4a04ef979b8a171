"""Database models package."""

from gathrio.models.event import Event, TicketType
from gathrio.models.user import User

__all__ = ["User", "Event", "TicketType"]
