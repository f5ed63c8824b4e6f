"""DynamoDB store for booking records."""
import dataclasses
import logging
import uuid
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from storage.dynamodb_manager import DynamoDBManager
from validation.booking_validator import BookingValidator, EventLookup
from validation.errors import NotFoundError
from validation.models import Booking, to_item, writable_fields

logger = logging.getLogger(__name__)


class BookingStore(DynamoDBManager):
    """Store for bookings, keyed by ``booking_id`` with an ``event-index`` GSI."""

    EVENT_INDEX = 'event-index'

    def __init__(
        self,
        table_name: str,
        event_lookup: EventLookup,
        region_name: Optional[str] = None
    ):
        super().__init__(table_name, region_name=region_name)
        self.validator = BookingValidator(event_lookup)

    def save_booking(self, event_id: str, email: str) -> Booking:
        """
        Validate and insert a new booking.

        Args:
            event_id: ID of the booked event
            email: Attendee email address

        Returns:
            The stored Booking

        Raises:
            ValidationError: if the email or event reference is rejected
        """
        booking = self.validator.validate(Booking(event_id=event_id, email=email))

        now = self.now()
        booking = dataclasses.replace(
            booking,
            booking_id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now
        )

        try:
            self.table.put_item(
                Item=to_item(booking),
                ConditionExpression=Attr('booking_id').not_exists()
            )
        except ClientError as e:
            logger.error(f"Error writing booking for event {booking.event_id}: {e}")
            raise

        logger.info(f"Created booking {booking.booking_id} for event {booking.event_id}")
        return booking

    def update_booking(self, booking_id: str, fields: Dict[str, Any]) -> Booking:
        """
        Apply a partial update to an existing booking.

        The event reference is only re-checked when ``event_id`` changes.

        Raises:
            NotFoundError: if the booking does not exist
            ValidationError: if the email or event reference is rejected
        """
        original = self.get_booking(booking_id)
        if original is None:
            raise NotFoundError('booking not found', field='booking_id')

        candidate = dataclasses.replace(original, **writable_fields(Booking, fields))
        booking = self.validator.validate(candidate, original=original)
        booking = dataclasses.replace(booking, updated_at=self.now())

        try:
            self.table.put_item(
                Item=to_item(booking),
                ConditionExpression=Attr('booking_id').exists()
            )
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                raise NotFoundError('booking not found', field='booking_id') from e
            logger.error(f"Error updating booking {booking_id}: {e}")
            raise

        logger.info(f"Updated booking {booking_id}")
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(Key={'booking_id': booking_id})
        except ClientError as e:
            logger.error(f"Error reading booking {booking_id}: {e}")
            raise

        item = response.get('Item')
        return self._item_to_booking(item) if item else None

    def list_bookings_for_event(self, event_id: str) -> List[Booking]:
        """
        Retrieve all bookings of an event through the event index.

        Args:
            event_id: ID of the event

        Returns:
            Bookings ordered by creation time
        """
        items = self.query_items(
            IndexName=self.EVENT_INDEX,
            KeyConditionExpression=Key('event_id').eq(event_id)
        )
        bookings = [self._item_to_booking(item) for item in items]
        return sorted(bookings, key=lambda booking: booking.created_at or 0)

    def delete_booking(self, booking_id: str) -> bool:
        """Delete a booking; returns False if it did not exist."""
        try:
            response = self.table.delete_item(
                Key={'booking_id': booking_id},
                ReturnValues='ALL_OLD'
            )
        except ClientError as e:
            logger.error(f"Error deleting booking {booking_id}: {e}")
            raise

        deleted = 'Attributes' in response
        if deleted:
            logger.info(f"Deleted booking {booking_id}")
        return deleted

    def _item_to_booking(self, item: dict) -> Booking:
        return Booking(
            booking_id=item['booking_id'],
            event_id=item.get('event_id'),
            email=item.get('email'),
            created_at=self.to_int(item.get('created_at')),
            updated_at=self.to_int(item.get('updated_at'))
        )
