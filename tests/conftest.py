"""Shared fixtures for DynamoDB-backed tests."""
import boto3
import pytest
from moto import mock_aws

from storage.booking_store import BookingStore
from storage.event_store import EventStore


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing reaches real AWS."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture
def dynamodb_tables():
    """Create mock events and bookings tables."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')

        events = dynamodb.create_table(
            TableName='test-events',
            KeySchema=[
                {'AttributeName': 'event_id', 'KeyType': 'HASH'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'event_id', 'AttributeType': 'S'}
            ],
            BillingMode='PROVISIONED',
            ProvisionedThroughput={
                'ReadCapacityUnits': 5,
                'WriteCapacityUnits': 5
            }
        )

        bookings = dynamodb.create_table(
            TableName='test-bookings',
            KeySchema=[
                {'AttributeName': 'booking_id', 'KeyType': 'HASH'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'booking_id', 'AttributeType': 'S'},
                {'AttributeName': 'event_id', 'AttributeType': 'S'}
            ],
            GlobalSecondaryIndexes=[
                {
                    'IndexName': 'event-index',
                    'KeySchema': [
                        {'AttributeName': 'event_id', 'KeyType': 'HASH'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'},
                    'ProvisionedThroughput': {
                        'ReadCapacityUnits': 5,
                        'WriteCapacityUnits': 5
                    }
                }
            ],
            BillingMode='PROVISIONED',
            ProvisionedThroughput={
                'ReadCapacityUnits': 5,
                'WriteCapacityUnits': 5
            }
        )

        yield events, bookings


@pytest.fixture
def event_store(dynamodb_tables):
    return EventStore('test-events', region_name='us-east-1')


@pytest.fixture
def booking_store(dynamodb_tables, event_store):
    return BookingStore('test-bookings', event_lookup=event_store, region_name='us-east-1')


@pytest.fixture
def event_fields():
    """Fields of a valid event as a caller would submit them."""
    return {
        'title': 'React Summit US 2025',
        'description': 'The biggest React conference in the US',
        'overview': 'Two days of talks and workshops',
        'image': '/images/event1.png',
        'venue': 'Moscone Center',
        'location': 'San Francisco, CA, USA',
        'date': 'November 7, 2025',
        'time': '9:00 AM',
        'mode': 'offline',
        'audience': 'Developers',
        'agenda': ['Keynote', ' Workshops '],
        'organizer': 'GitNation',
        'tags': ['React', ' Frontend '],
    }
