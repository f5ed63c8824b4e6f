"""Data models for events and bookings."""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional


@dataclass
class Event:
    """Event record as read from or written to storage."""
    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None
    event_id: Optional[str] = None
    slug: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


@dataclass
class Booking:
    """Booking of a single email address onto an event."""
    event_id: Optional[str] = None
    email: Optional[str] = None
    booking_id: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


# Fields assigned by the store; callers cannot set them directly.
EVENT_MANAGED_FIELDS = frozenset({'event_id', 'slug', 'created_at', 'updated_at'})
BOOKING_MANAGED_FIELDS = frozenset({'booking_id', 'created_at', 'updated_at'})


def field_names(model) -> List[str]:
    return [f.name for f in fields(model)]


def writable_fields(model, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pick the caller-writable fields of ``model`` out of ``data``.

    Unknown keys and store-managed keys are dropped.

    Args:
        model: Event or Booking class
        data: Raw field mapping from the caller

    Returns:
        Filtered field mapping
    """
    managed = EVENT_MANAGED_FIELDS if model is Event else BOOKING_MANAGED_FIELDS
    allowed = set(field_names(model)) - managed
    return {key: value for key, value in data.items() if key in allowed}


def to_item(record) -> Dict[str, Any]:
    """Convert a record to a storage item, leaving out unset fields."""
    return {
        name: getattr(record, name)
        for name in field_names(type(record))
        if getattr(record, name) is not None
    }
