"""Pre-save validation and normalization for event records."""
import dataclasses
import logging
from datetime import date
from typing import Any, List, Optional

from validation.errors import (
    InvalidCollectionError,
    InvalidFormatError,
    RequiredFieldEmptyError,
)
from validation.models import Event
from validation.normalizers import normalize_date, normalize_time, slugify

logger = logging.getLogger(__name__)


class EventValidator:
    """Validator for event records, run by the store before every write."""

    REQUIRED_STRING_FIELDS = (
        'title',
        'description',
        'overview',
        'image',
        'venue',
        'location',
        'date',
        'time',
        'mode',
        'audience',
        'organizer',
    )

    def validate(self, event: Event, original: Optional[Event] = None) -> Event:
        """
        Validate an event and return its normalized copy.

        The slug, date and time are only recomputed when they are new or
        differ from ``original``.

        Args:
            event: In-flight event record
            original: Stored version of the record, or None on create

        Returns:
            Normalized Event ready to be written

        Raises:
            ValidationError: if any field is rejected
        """
        changes = {
            name: self._trim(getattr(event, name))
            for name in self.REQUIRED_STRING_FIELDS
        }
        # date and datetime objects are left for normalize_date
        if isinstance(event.date, date):
            changes['date'] = event.date
        changes['agenda'] = self._clean_collection(event.agenda, 'agenda')
        changes['tags'] = [
            tag.lower() for tag in self._clean_collection(event.tags, 'tags')
        ]

        for name in self.REQUIRED_STRING_FIELDS:
            if not changes[name]:
                raise RequiredFieldEmptyError(name)

        if self._is_modified('title', changes['title'], original) or not original.slug:
            slug = slugify(changes['title'])
            if not slug:
                raise InvalidFormatError(
                    f"title {changes['title']!r} does not produce a usable slug",
                    field='slug'
                )
            changes['slug'] = slug
            logger.debug(f"Derived slug '{slug}' for event '{changes['title']}'")
        else:
            changes['slug'] = original.slug

        if self._is_modified('date', changes['date'], original):
            changes['date'] = normalize_date(changes['date'])
        if self._is_modified('time', changes['time'], original):
            changes['time'] = normalize_time(changes['time'])

        return dataclasses.replace(event, **changes)

    @staticmethod
    def _is_modified(name: str, value: Any, original: Optional[Event]) -> bool:
        return original is None or getattr(original, name) != value

    @staticmethod
    def _trim(value: Any) -> Any:
        return value.strip() if isinstance(value, str) else None

    @staticmethod
    def _clean_collection(values: Any, name: str) -> List[str]:
        if not isinstance(values, (list, tuple)) or not values:
            raise InvalidCollectionError(name)

        cleaned = []
        for value in values:
            if not isinstance(value, str) or not value.strip():
                raise InvalidCollectionError(name)
            cleaned.append(value.strip())
        return cleaned
