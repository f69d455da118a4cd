"""
Tests for DynamoDB utilities.
"""
import pytest
from unittest.mock import MagicMock, patch

from boto3.dynamodb.conditions import Key

from src.utils import dynamo as dynamo_module
from src.utils.dynamo import (
    DynamoDBClient,
    create_pk,
    create_period_sk,
    create_symptom_sk,
    get_dynamo,
    reset_dynamo
)

@pytest.fixture
def table():
    """Create DynamoDBClient with a mocked boto3 table."""
    with patch('src.utils.dynamo.boto3') as mock_boto3:
        mock_table = MagicMock()
        mock_boto3.resource.return_value.Table.return_value = mock_table
        yield DynamoDBClient("TrackerTable-test"), mock_table

def test_key_builders():
    assert create_pk("42") == "USER#42"
    assert create_period_sk("2024-01-01", "abc") == "PERIOD#2024-01-01#abc"
    assert create_symptom_sk("2024-01-02", "def") == "SYMPTOM#2024-01-02#def"

def test_query_items_follows_pagination(table):
    client, mock_table = table
    mock_table.query.side_effect = [
        {"Items": [{"SK": "a"}], "LastEvaluatedKey": {"PK": "USER#1", "SK": "a"}},
        {"Items": [{"SK": "b"}]}
    ]

    items = client.query_items("PK", "USER#1", Key("SK").begins_with("PERIOD#"), scan_forward=False)

    assert items == [{"SK": "a"}, {"SK": "b"}]
    assert mock_table.query.call_count == 2
    second_call = mock_table.query.call_args_list[1][1]
    assert second_call["ExclusiveStartKey"] == {"PK": "USER#1", "SK": "a"}
    assert second_call["ScanIndexForward"] is False

def test_get_item_missing(table):
    client, mock_table = table
    mock_table.get_item.return_value = {}
    assert client.get_item({"PK": "USER#1", "SK": "PROFILE"}) is None

def test_delete_items_uses_batch_writer(table):
    client, mock_table = table
    batch = mock_table.batch_writer.return_value.__enter__.return_value

    deleted = client.delete_items([{"PK": "USER#1", "SK": "a"}, {"PK": "USER#1", "SK": "b"}])

    assert deleted == 2
    assert batch.delete_item.call_count == 2

def test_get_dynamo_requires_table_name(monkeypatch):
    reset_dynamo()
    monkeypatch.delenv("TRACKER_TABLE_NAME", raising=False)
    try:
        with pytest.raises(EnvironmentError, match="TRACKER_TABLE_NAME"):
            get_dynamo()
    finally:
        reset_dynamo()

def test_get_dynamo_is_singleton(monkeypatch):
    reset_dynamo()
    monkeypatch.setenv("TRACKER_TABLE_NAME", "TrackerTable-test")
    try:
        with patch('src.utils.dynamo.boto3'):
            assert get_dynamo() is get_dynamo()
            assert dynamo_module._dynamo_instance is not None
    finally:
        reset_dynamo()
