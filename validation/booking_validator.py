"""Pre-save validation for booking records."""
import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Optional

from validation.errors import DanglingReferenceError, RequiredFieldEmptyError
from validation.models import Booking
from validation.normalizers import normalize_email

logger = logging.getLogger(__name__)


class EventLookup(ABC):
    """Read-only view of the event collection used for reference checks."""

    @abstractmethod
    def exists(self, event_id: str) -> bool:
        """Check if an event exists."""
        ...


class BookingValidator:
    """Validator for booking records, run by the store before every write."""

    def __init__(self, event_lookup: EventLookup):
        """
        Args:
            event_lookup: Source used to confirm referenced events exist
        """
        self.event_lookup = event_lookup

    def validate(self, booking: Booking, original: Optional[Booking] = None) -> Booking:
        """
        Validate a booking and return its normalized copy.

        The email is checked on every save. The referenced event is looked
        up only on create or when ``event_id`` changed; no lock is held
        between the lookup and the write.

        Args:
            booking: In-flight booking record
            original: Stored version of the record, or None on create

        Returns:
            Normalized Booking ready to be written

        Raises:
            ValidationError: if the email or event reference is rejected
        """
        email = normalize_email(booking.email)

        event_id = booking.event_id.strip() if isinstance(booking.event_id, str) else None
        if not event_id:
            raise RequiredFieldEmptyError('event_id')

        if original is None or original.event_id != event_id:
            if not self.event_lookup.exists(event_id):
                logger.warning(f"Booking references missing event: {event_id}")
                raise DanglingReferenceError(
                    'Referenced event does not exist',
                    field='event_id'
                )

        return dataclasses.replace(booking, email=email, event_id=event_id)
