"""Unit tests for DynamoDB connection and table management."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from chargeback_api.core.config import (
    LOCAL_ACCESS_KEY_ID,
    LOCAL_SECRET_ACCESS_KEY,
    DynamoDBConfig,
)
from chargeback_api.core.errors import StorageError
from chargeback_api.persistence.dynamodb import (
    create_dynamodb_resource,
    create_table,
    describe_table,
    drop_table,
    get_table,
    table_definition,
)


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


@pytest.fixture
def aws_config():
    """Config for the real AWS endpoint."""
    return DynamoDBConfig(endpoint="", region="eu-west-1", table_name="chargebacks")


@pytest.fixture
def local_config():
    """Config for DynamoDB Local."""
    return DynamoDBConfig(endpoint="http://localhost:8000", table_name="chargebacks")


class TestCreateResource:
    """Test create_dynamodb_resource."""

    def test_aws_endpoint_uses_default_credentials(self, aws_config):
        """Test no endpoint or static credentials are passed for AWS."""
        with patch("chargeback_api.persistence.dynamodb.boto3.resource") as mock_resource:
            create_dynamodb_resource(aws_config)

        args, kwargs = mock_resource.call_args
        assert args == ("dynamodb",)
        assert kwargs["region_name"] == "eu-west-1"
        assert "endpoint_url" not in kwargs
        assert "aws_access_key_id" not in kwargs

    def test_local_endpoint_uses_dummy_credentials(self, local_config):
        """Test DynamoDB Local gets the endpoint and placeholder credentials."""
        with patch("chargeback_api.persistence.dynamodb.boto3.resource") as mock_resource:
            create_dynamodb_resource(local_config)

        kwargs = mock_resource.call_args.kwargs
        assert kwargs["endpoint_url"] == "http://localhost:8000"
        assert kwargs["aws_access_key_id"] == LOCAL_ACCESS_KEY_ID
        assert kwargs["aws_secret_access_key"] == LOCAL_SECRET_ACCESS_KEY

    def test_local_endpoint_prefers_configured_credentials(self):
        """Test explicit credentials win over the placeholders."""
        config = DynamoDBConfig(
            endpoint="http://localhost:8000",
            access_key_id="AKIATEST",
            secret_access_key="secret",
        )
        with patch("chargeback_api.persistence.dynamodb.boto3.resource") as mock_resource:
            create_dynamodb_resource(config)

        kwargs = mock_resource.call_args.kwargs
        assert kwargs["aws_access_key_id"] == "AKIATEST"
        assert kwargs["aws_secret_access_key"] == "secret"

    def test_retries_disabled(self, aws_config):
        """Test the client makes a single attempt."""
        with patch("chargeback_api.persistence.dynamodb.boto3.resource") as mock_resource:
            create_dynamodb_resource(aws_config)

        config = mock_resource.call_args.kwargs["config"]
        assert config.retries["max_attempts"] == 1

    def test_get_table_uses_table_name(self, aws_config):
        """Test get_table resolves the configured table."""
        resource = MagicMock()
        get_table(aws_config, resource)
        resource.Table.assert_called_once_with("chargebacks")


class TestTableDefinition:
    """Test table_definition."""

    def test_hash_key_is_id(self, aws_config):
        """Test the table is keyed by id."""
        definition = table_definition(aws_config)
        assert definition["KeySchema"] == [{"AttributeName": "id", "KeyType": "HASH"}]
        assert definition["BillingMode"] == "PAY_PER_REQUEST"

    def test_three_secondary_indexes(self, aws_config):
        """Test transaction, merchant and status indexes are declared."""
        indexes = {
            index["IndexName"]: index["KeySchema"][0]["AttributeName"]
            for index in table_definition(aws_config)["GlobalSecondaryIndexes"]
        }
        assert indexes == {
            "transaction-id-index": "transaction_id",
            "merchant-id-index": "merchant_id",
            "status-index": "status",
        }


class TestTableLifecycle:
    """Test create_table, drop_table and describe_table."""

    def test_create_table(self, aws_config):
        """Test the table is created and awaited."""
        resource = MagicMock()

        assert create_table(aws_config, resource) is True

        resource.create_table.assert_called_once()
        resource.create_table.return_value.wait_until_exists.assert_called_once()

    def test_create_existing_table(self, aws_config):
        """Test an existing table is not an error."""
        resource = MagicMock()
        resource.create_table.side_effect = _client_error("ResourceInUseException")

        assert create_table(aws_config, resource) is False

    def test_create_table_failure(self, aws_config):
        """Test other AWS errors become StorageError."""
        resource = MagicMock()
        resource.create_table.side_effect = _client_error("AccessDeniedException")

        with pytest.raises(StorageError):
            create_table(aws_config, resource)

    def test_drop_missing_table(self, aws_config):
        """Test dropping a missing table returns False."""
        resource = MagicMock()
        resource.Table.return_value.delete.side_effect = _client_error(
            "ResourceNotFoundException"
        )

        assert drop_table(aws_config, resource) is False

    def test_describe_table(self, aws_config):
        """Test table status and sorted index names are returned."""
        resource = MagicMock()
        resource.meta.client.describe_table.return_value = {
            "Table": {
                "TableName": "chargebacks",
                "TableStatus": "ACTIVE",
                "ItemCount": 3,
                "GlobalSecondaryIndexes": [
                    {"IndexName": "status-index"},
                    {"IndexName": "merchant-id-index"},
                ],
            }
        }

        assert describe_table(aws_config, resource) == {
            "name": "chargebacks",
            "status": "ACTIVE",
            "item_count": 3,
            "indexes": ["merchant-id-index", "status-index"],
        }

    def test_describe_missing_table(self, aws_config):
        """Test a missing table describes as None."""
        resource = MagicMock()
        resource.meta.client.describe_table.side_effect = _client_error(
            "ResourceNotFoundException"
        )

        assert describe_table(aws_config, resource) is None
