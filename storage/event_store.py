"""DynamoDB store for event records."""
import dataclasses
import logging
import uuid
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from storage.dynamodb_manager import DynamoDBManager
from validation.booking_validator import EventLookup
from validation.errors import DuplicateKeyError, NotFoundError
from validation.event_validator import EventValidator
from validation.models import Event, to_item, writable_fields

logger = logging.getLogger(__name__)

EVENT_ITEM = 'event'
SLUG_ITEM = 'slug'
SLUG_KEY_PREFIX = 'slug#'


class EventStore(DynamoDBManager, EventLookup):
    """
    Store for events.

    Events and their slug guard items share one table keyed by
    ``event_id``. A guard item ``slug#<slug>`` is owned by exactly one
    event and is written in the same transaction as the event, which keeps
    slugs unique.
    """

    def __init__(
        self,
        table_name: str,
        validator: Optional[EventValidator] = None,
        region_name: Optional[str] = None
    ):
        super().__init__(table_name, region_name=region_name)
        self.validator = validator or EventValidator()

    def save_event(self, fields: Dict[str, Any]) -> Event:
        """
        Validate and insert a new event.

        Args:
            fields: Event fields supplied by the caller

        Returns:
            The stored Event

        Raises:
            ValidationError: if a field is rejected
            DuplicateKeyError: if another event already owns the slug
        """
        event = self.validator.validate(Event(**writable_fields(Event, fields)))

        now = self.now()
        event = dataclasses.replace(
            event,
            event_id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now
        )

        operations = [
            self._put_event(event, 'attribute_not_exists(event_id)'),
            self._put_slug_guard(event),
        ]
        self._write(operations, event)

        logger.info(f"Created event {event.event_id} with slug '{event.slug}'")
        return event

    def update_event(self, event_id: str, fields: Dict[str, Any]) -> Event:
        """
        Apply a partial update to an existing event.

        Args:
            event_id: ID of the event to update
            fields: Changed fields supplied by the caller

        Returns:
            The stored Event

        Raises:
            NotFoundError: if the event does not exist
            ValidationError: if a field is rejected
            DuplicateKeyError: if a new title collides with another slug
        """
        original = self.get_event(event_id)
        if original is None:
            raise NotFoundError('event not found', field='event_id')

        candidate = dataclasses.replace(original, **writable_fields(Event, fields))
        event = self.validator.validate(candidate, original=original)
        event = dataclasses.replace(event, updated_at=self.now())

        operations = [self._put_event(event, 'attribute_exists(event_id)')]
        if event.slug != original.slug:
            operations.append(self._put_slug_guard(event))
            if original.slug:
                operations.append(self._delete_slug_guard(original))
        self._write(operations, event)

        logger.info(f"Updated event {event.event_id}")
        return event

    def get_event(self, event_id: str) -> Optional[Event]:
        """
        Retrieve an event by ID.

        Returns:
            Event or None if it does not exist
        """
        try:
            response = self.table.get_item(Key={'event_id': event_id})
        except ClientError as e:
            logger.error(f"Error reading event {event_id}: {e}")
            raise

        item = response.get('Item')
        if not item or item.get('item_type') != EVENT_ITEM:
            return None
        return self._item_to_event(item)

    def get_event_by_slug(self, slug: str) -> Optional[Event]:
        """Resolve a slug through its guard item and return the owning event."""
        try:
            response = self.table.get_item(Key={'event_id': SLUG_KEY_PREFIX + slug})
        except ClientError as e:
            logger.error(f"Error reading slug '{slug}': {e}")
            raise

        item = response.get('Item')
        if not item:
            return None
        return self.get_event(item['owner_id'])

    def list_events(self) -> List[Event]:
        """Return all events ordered by date and time."""
        items = self.scan_items(FilterExpression=Attr('item_type').eq(EVENT_ITEM))
        events = [self._item_to_event(item) for item in items]
        logger.info(f"Retrieved {len(events)} events from DynamoDB")
        return sorted(events, key=lambda event: (event.date, event.time))

    def exists(self, event_id: str) -> bool:
        try:
            response = self.table.get_item(
                Key={'event_id': event_id},
                ProjectionExpression='event_id, item_type'
            )
        except ClientError as e:
            logger.error(f"Error checking event {event_id}: {e}")
            raise

        item = response.get('Item')
        return bool(item) and item.get('item_type') == EVENT_ITEM

    def delete_event(self, event_id: str) -> bool:
        """
        Delete an event and release its slug.

        Bookings referencing the event are left in place.

        Returns:
            True if an event was deleted, False if none existed
        """
        event = self.get_event(event_id)
        if event is None:
            return False

        operations = [{'Delete': {'Key': {'event_id': event_id}}}]
        if event.slug:
            operations.append(self._delete_slug_guard(event))

        try:
            self.transact_write(operations)
        except ClientError as e:
            logger.error(f"Error deleting event {event_id}: {e}")
            raise

        logger.info(f"Deleted event {event_id}")
        return True

    def _write(self, operations: List[Dict[str, Any]], event: Event) -> None:
        try:
            self.transact_write(operations)
        except ClientError as e:
            codes = self.cancellation_codes(e)

            # Operation 0 is the event put, operation 1 the new slug guard.
            if codes[:1] == ['ConditionalCheckFailed']:
                raise NotFoundError('event not found', field='event_id') from e
            if codes[1:2] != ['ConditionalCheckFailed']:
                logger.error(f"Error writing event {event.event_id}: {e}")
                raise

            logger.warning(f"Slug '{event.slug}' is already taken")
            raise DuplicateKeyError(
                f"slug '{event.slug}' already exists",
                field='slug'
            ) from e

    @staticmethod
    def _put_event(event: Event, condition: str) -> Dict[str, Any]:
        item = to_item(event)
        item['item_type'] = EVENT_ITEM
        return {'Put': {'Item': item, 'ConditionExpression': condition}}

    @staticmethod
    def _put_slug_guard(event: Event) -> Dict[str, Any]:
        return {
            'Put': {
                'Item': {
                    'event_id': SLUG_KEY_PREFIX + event.slug,
                    'item_type': SLUG_ITEM,
                    'owner_id': event.event_id,
                },
                'ConditionExpression': 'attribute_not_exists(event_id) OR owner_id = :owner',
                'ExpressionAttributeValues': {':owner': event.event_id},
            }
        }

    @staticmethod
    def _delete_slug_guard(event: Event) -> Dict[str, Any]:
        return {
            'Delete': {
                'Key': {'event_id': SLUG_KEY_PREFIX + event.slug},
                'ConditionExpression': 'owner_id = :owner',
                'ExpressionAttributeValues': {':owner': event.event_id},
            }
        }

    def _item_to_event(self, item: dict) -> Event:
        """
        Convert DynamoDB item to Event object.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Event object
        """
        return Event(
            event_id=item['event_id'],
            slug=item.get('slug'),
            title=item.get('title'),
            description=item.get('description'),
            overview=item.get('overview'),
            image=item.get('image'),
            venue=item.get('venue'),
            location=item.get('location'),
            date=item.get('date'),
            time=item.get('time'),
            mode=item.get('mode'),
            audience=item.get('audience'),
            agenda=list(item.get('agenda', [])),
            organizer=item.get('organizer'),
            tags=list(item.get('tags', [])),
            created_at=self.to_int(item.get('created_at')),
            updated_at=self.to_int(item.get('updated_at'))
        )
