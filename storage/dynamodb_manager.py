"""Shared DynamoDB plumbing for the event and booking stores."""
import logging
import time
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class DynamoDBManager:
    """Base class for stores backed by a single DynamoDB table."""

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB clients and table reference.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region, or None for the boto3 default chain
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)
        # Transactions go through the low-level client with typed values.
        self.client = boto3.client('dynamodb', region_name=region_name)
        self.serializer = TypeSerializer()
        logger.info(f"Initialized {type(self).__name__} for table: {table_name}")

    @staticmethod
    def now() -> int:
        return int(time.time())

    def scan_items(self, **kwargs) -> List[dict]:
        """
        Retrieve every item of the table matching the scan arguments.

        Args:
            **kwargs: Extra arguments passed to Table.scan

        Returns:
            List of raw DynamoDB items
        """
        try:
            # Scan the table (paginated manually)
            response = self.table.scan(**kwargs)
            items = response.get('Items', [])

            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey'],
                    **kwargs
                )
                items.extend(response.get('Items', []))

            return items

        except ClientError as e:
            logger.error(f"Error scanning DynamoDB table {self.table_name}: {e}")
            raise

    def query_items(self, **kwargs) -> List[dict]:
        """Run a paginated Query and return every matching item."""
        try:
            response = self.table.query(**kwargs)
            items = response.get('Items', [])

            while 'LastEvaluatedKey' in response:
                response = self.table.query(
                    ExclusiveStartKey=response['LastEvaluatedKey'],
                    **kwargs
                )
                items.extend(response.get('Items', []))

            return items

        except ClientError as e:
            logger.error(f"Error querying DynamoDB table {self.table_name}: {e}")
            raise

    def serialize(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {key: self.serializer.serialize(value) for key, value in item.items()}

    def transact_write(self, operations: List[Dict[str, Any]]) -> None:
        """
        Apply write operations atomically.

        Each operation is a single-key dict such as ``{'Put': {...}}`` whose
        ``Item``, ``Key`` and ``ExpressionAttributeValues`` hold plain Python
        values. The table name is filled in when missing.

        Args:
            operations: Operations for TransactWriteItems

        Raises:
            ClientError: if the transaction is cancelled or fails
        """
        transact_items = []
        for operation in operations:
            kind, params = next(iter(operation.items()))
            params = dict(params)
            params.setdefault('TableName', self.table_name)
            for key in ('Item', 'Key', 'ExpressionAttributeValues'):
                if key in params:
                    params[key] = self.serialize(params[key])
            transact_items.append({kind: params})

        self.client.transact_write_items(TransactItems=transact_items)

    @staticmethod
    def cancellation_codes(error: ClientError) -> List[str]:
        """
        Return the per-operation reason codes of a cancelled transaction.

        Returns an empty list when the error is not a cancellation or the
        response carries no reasons.
        """
        if error.response.get('Error', {}).get('Code') != 'TransactionCanceledException':
            return []
        return [
            reason.get('Code', 'None')
            for reason in error.response.get('CancellationReasons', [])
        ]

    @staticmethod
    def to_int(value: Any) -> Optional[int]:
        return int(value) if value is not None else None
