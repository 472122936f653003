"""DynamoDB connection and table management.

The chargebacks table is keyed by `id` with three global secondary indexes:
transaction_id, merchant_id and status. All use ALL projection so lookups
return complete items.
"""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from chargeback_api.core.config import DynamoDBConfig
from chargeback_api.core.errors import StorageError
from chargeback_api.core.logging import get_logger

logger = get_logger(__name__)


def create_dynamodb_resource(config: DynamoDBConfig) -> Any:
    """Create a boto3 DynamoDB service resource.

    With a custom endpoint (DynamoDB Local) static credentials are used;
    otherwise the default AWS credential chain applies.
    """
    kwargs: dict[str, Any] = {
        "region_name": config.region,
        # Single attempt, no retries
        "config": Config(retries={"max_attempts": 1, "mode": "standard"}),
    }

    if config.is_local:
        access_key_id, secret_access_key = config.static_credentials
        kwargs["endpoint_url"] = config.endpoint
        kwargs["aws_access_key_id"] = access_key_id
        kwargs["aws_secret_access_key"] = secret_access_key
        logger.info("Using custom DynamoDB endpoint", endpoint=config.endpoint)

    resource = boto3.resource("dynamodb", **kwargs)

    logger.info(
        "DynamoDB resource initialized",
        region=config.region,
        table_name=config.table_name,
    )
    return resource


def get_table(config: DynamoDBConfig, resource: Any | None = None) -> Any:
    """Get the chargebacks Table handle."""
    resource = resource or create_dynamodb_resource(config)
    return resource.Table(config.table_name)


def table_definition(config: DynamoDBConfig) -> dict[str, Any]:
    """CreateTable parameters for the chargebacks table."""
    return {
        "TableName": config.table_name,
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "transaction_id", "AttributeType": "S"},
            {"AttributeName": "merchant_id", "AttributeType": "S"},
            {"AttributeName": "status", "AttributeType": "S"},
        ],
        "KeySchema": [{"AttributeName": "id", "KeyType": "HASH"}],
        "BillingMode": "PAY_PER_REQUEST",
        "GlobalSecondaryIndexes": [
            _index(config.transaction_index, "transaction_id"),
            _index(config.merchant_index, "merchant_id"),
            _index(config.status_index, "status"),
        ],
    }


def _index(name: str, attribute: str) -> dict[str, Any]:
    return {
        "IndexName": name,
        "KeySchema": [{"AttributeName": attribute, "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
    }


def create_table(config: DynamoDBConfig, resource: Any | None = None) -> bool:
    """Create the chargebacks table. Returns False if it already exists."""
    resource = resource or create_dynamodb_resource(config)
    try:
        table = resource.create_table(**table_definition(config))
        table.wait_until_exists()
    except ClientError as exc:
        if exc.response["Error"]["Code"] == "ResourceInUseException":
            return False
        raise StorageError(f"failed to create table: {exc}") from exc
    except BotoCoreError as exc:
        raise StorageError(f"failed to create table: {exc}") from exc

    logger.info("DynamoDB table created", table_name=config.table_name)
    return True


def drop_table(config: DynamoDBConfig, resource: Any | None = None) -> bool:
    """Delete the chargebacks table. Returns False if it does not exist."""
    resource = resource or create_dynamodb_resource(config)
    table = resource.Table(config.table_name)
    try:
        table.delete()
        table.wait_until_not_exists()
    except ClientError as exc:
        if exc.response["Error"]["Code"] == "ResourceNotFoundException":
            return False
        raise StorageError(f"failed to drop table: {exc}") from exc
    except BotoCoreError as exc:
        raise StorageError(f"failed to drop table: {exc}") from exc

    logger.info("DynamoDB table dropped", table_name=config.table_name)
    return True


def describe_table(config: DynamoDBConfig, resource: Any | None = None) -> dict[str, Any] | None:
    """Return table status and index names, or None if the table is missing."""
    resource = resource or create_dynamodb_resource(config)
    client = resource.meta.client
    try:
        response = client.describe_table(TableName=config.table_name)
    except ClientError as exc:
        if exc.response["Error"]["Code"] == "ResourceNotFoundException":
            return None
        raise StorageError(f"failed to describe table: {exc}") from exc
    except BotoCoreError as exc:
        raise StorageError(f"failed to describe table: {exc}") from exc

    table = response["Table"]
    return {
        "name": table["TableName"],
        "status": table["TableStatus"],
        "item_count": table.get("ItemCount", 0),
        "indexes": sorted(
            index["IndexName"] for index in table.get("GlobalSecondaryIndexes", [])
        ),
    }
