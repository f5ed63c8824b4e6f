"""AWS Lambda handler for the event booking records service."""
import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from storage.booking_store import BookingStore
from storage.event_store import EventStore
from validation.errors import (
    DuplicateKeyError,
    NotFoundError,
    RequiredFieldEmptyError,
    ServiceError,
    ValidationError,
)


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


@dataclass
class Settings:
    """Runtime configuration read from the environment."""
    events_table: str = 'events'
    bookings_table: str = 'bookings'
    log_level: str = 'INFO'
    region_name: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            events_table=os.environ.get('EVENTS_TABLE', 'events'),
            bookings_table=os.environ.get('BOOKINGS_TABLE', 'bookings'),
            log_level=os.environ.get('LOG_LEVEL', 'INFO'),
            region_name=os.environ.get('AWS_REGION') or None
        )


@dataclass
class AppContext:
    """Stores shared by every request handled in this process."""
    event_store: EventStore
    booking_store: BookingStore


def build_context(settings: Settings) -> AppContext:
    event_store = EventStore(settings.events_table, region_name=settings.region_name)
    booking_store = BookingStore(
        settings.bookings_table,
        event_lookup=event_store,
        region_name=settings.region_name
    )
    return AppContext(event_store=event_store, booking_store=booking_store)


_app_context: Optional[AppContext] = None


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {'statusCode': status_code, 'body': json.dumps(body)}


def _error_response(status_code: int, message: str, error: Exception) -> Dict[str, Any]:
    body = {
        'message': message,
        'error': str(error),
        'error_type': type(error).__name__
    }
    if isinstance(error, ServiceError):
        body['code'] = error.code
        body['field'] = error.field
    return _response(status_code, body)


def _require(payload: Dict[str, Any], name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str) or not value.strip():
        raise RequiredFieldEmptyError(name)
    return value


def handle_request(request: Dict[str, Any], app: AppContext) -> Dict[str, Any]:
    """
    Dispatch one request to the stores.

    Args:
        request: Payload with ``action`` and ``payload`` keys
        app: Stores to operate on

    Returns:
        Response dict with statusCode and JSON body
    """
    logger = logging.getLogger(__name__)
    action = request.get('action')
    payload = request.get('payload') or {}

    try:
        if action == 'save_event':
            event = app.event_store.save_event(payload)
            return _response(201, {'message': 'Event created', 'event': asdict(event)})

        if action == 'update_event':
            event = app.event_store.update_event(
                _require(payload, 'event_id'),
                payload.get('fields') or {}
            )
            return _response(200, {'message': 'Event updated', 'event': asdict(event)})

        if action == 'get_event':
            if payload.get('slug'):
                event = app.event_store.get_event_by_slug(payload['slug'])
            else:
                event = app.event_store.get_event(_require(payload, 'event_id'))
            if event is None:
                raise NotFoundError('event not found')
            return _response(200, {'event': asdict(event)})

        if action == 'save_booking':
            booking = app.booking_store.save_booking(
                payload.get('event_id'),
                payload.get('email')
            )
            return _response(201, {'message': 'Booking created', 'booking': asdict(booking)})

        if action == 'list_bookings':
            bookings = app.booking_store.list_bookings_for_event(_require(payload, 'event_id'))
            return _response(200, {'bookings': [asdict(b) for b in bookings]})

    except DuplicateKeyError as e:
        logger.warning(f"Rejected {action}: {e}")
        return _error_response(409, 'Duplicate record', e)
    except ValidationError as e:
        logger.warning(f"Rejected {action}: {e}", extra={'field': e.field, 'code': e.code})
        return _error_response(400, 'Validation failed', e)
    except NotFoundError as e:
        return _error_response(404, 'Record not found', e)

    logger.warning(f"Unknown action: {action}")
    return _response(400, {'message': f"Unknown action: {action}"})


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    The stores are built on the first invocation and reused while the
    execution environment stays warm.

    Args:
        event: Request payload with ``action`` and ``payload``
        context: Lambda context object

    Returns:
        Response dict with statusCode and JSON body
    """
    global _app_context

    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(f"Handling action: {event.get('action')}")

    try:
        if _app_context is None:
            _app_context = build_context(settings)
            logger.info(
                "Application context created",
                extra={
                    'events_table': settings.events_table,
                    'bookings_table': settings.bookings_table
                }
            )

        response = handle_request(event, _app_context)

        duration = time.time() - start_time
        logger.info(
            f"Request completed with status {response['statusCode']}",
            extra={'duration_seconds': round(duration, 2)}
        )
        return response

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Request failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _error_response(500, 'Request failed', e)
