"""
DynamoDB utility functions for data access.
"""
import os
from typing import Dict, List, Optional, Any
import boto3
from boto3.dynamodb.conditions import Key

# Singleton instance
_dynamo_instance = None

PROFILE_SK = "PROFILE"
PERIOD_SK_PREFIX = "PERIOD#"
SYMPTOM_SK_PREFIX = "SYMPTOM#"

def get_dynamo() -> 'DynamoDBClient':
    """
    Get or create singleton DynamoDB client instance.
    
    This is the ONLY way to access DynamoDB in this project. Never instantiate
    DynamoDBClient directly.
    
    Example:
        dynamo = get_dynamo()
        item = dynamo.get_item({"PK": create_pk("123"), "SK": PROFILE_SK})
    
    Returns:
        DynamoDBClient: Singleton instance of DynamoDB client
        
    Raises:
        EnvironmentError: If TRACKER_TABLE_NAME environment variable is not set
    """
    global _dynamo_instance
    if _dynamo_instance is None:
        try:
            table_name = os.environ['TRACKER_TABLE_NAME']
        except KeyError:
            raise EnvironmentError(
                "TRACKER_TABLE_NAME environment variable not set. "
                "This variable must be set to the DynamoDB table name."
            )
        _dynamo_instance = DynamoDBClient(table_name)
    return _dynamo_instance

def reset_dynamo() -> None:
    """Drop the cached client so the next call re-reads configuration."""
    global _dynamo_instance
    _dynamo_instance = None

class DynamoDBClient:
    """Client for interacting with DynamoDB table."""
    
    def __init__(self, table_name: str):
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
    
    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Put a single item into the table.
        
        Args:
            item: Dictionary containing item attributes
            
        Returns:
            Response from DynamoDB
        """
        return self.table.put_item(Item=item)
    
    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        Get a single item from the table.
        
        Args:
            key: Dictionary containing partition key and sort key
            
        Returns:
            Item if found, None otherwise
        """
        response = self.table.get_item(Key=key)
        return response.get('Item')
    
    def query_items(
        self,
        partition_key: str,
        partition_value: str,
        sort_key_condition: Optional[Key] = None,
        scan_forward: bool = True
    ) -> List[Dict[str, Any]]:
        """
        Query items using partition key and optional sort key condition.
        
        Follows pagination until every matching item has been read.
        
        Args:
            partition_key: Name of partition key
            partition_value: Value of partition key
            sort_key_condition: Optional sort key condition
            scan_forward: Ascending sort key order when True
            
        Returns:
            List of matching items
        """
        key_condition = Key(partition_key).eq(partition_value)
        if sort_key_condition:
            key_condition = key_condition & sort_key_condition
        
        query_args = {
            "KeyConditionExpression": key_condition,
            "ScanIndexForward": scan_forward
        }
        items = []
        while True:
            response = self.table.query(**query_args)
            items.extend(response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            query_args["ExclusiveStartKey"] = last_key
    
    def update_item(
        self,
        key: Dict[str, str],
        update_expression: str,
        expression_values: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Update an item in the table.
        
        Args:
            key: Dictionary containing partition key and sort key
            update_expression: Update expression
            expression_values: Expression attribute values
            
        Returns:
            Response from DynamoDB
        """
        return self.table.update_item(
            Key=key,
            UpdateExpression=update_expression,
            ExpressionAttributeValues=expression_values,
            ReturnValues="ALL_NEW"
        )
    
    def delete_items(self, keys: List[Dict[str, str]]) -> int:
        """
        Delete many items using a batch writer.

        Args:
            keys: Primary keys of the items to delete

        Returns:
            Number of delete requests sent
        """
        with self.table.batch_writer() as batch:
            for key in keys:
                batch.delete_item(Key=key)
        return len(keys)

def create_pk(user_id: str) -> str:
    """Create partition key from user ID."""
    return f"USER#{user_id}"

def create_period_sk(start_date: str, log_id: str) -> str:
    """
    Create sort key for period log entries.

    Args:
        start_date: ISO format start date of the period
        log_id: Unique log identifier

    Returns:
        Sort key in format "PERIOD#{start_date}#{log_id}"
    """
    return f"{PERIOD_SK_PREFIX}{start_date}#{log_id}"

def create_symptom_sk(date_str: str, log_id: str) -> str:
    """
    Create sort key for symptom log entries.

    Several logs may share a date, so the log id keeps keys unique.

    Args:
        date_str: ISO format date of the log
        log_id: Unique log identifier

    Returns:
        Sort key in format "SYMPTOM#{date_str}#{log_id}"
    """
    return f"{SYMPTOM_SK_PREFIX}{date_str}#{log_id}"
