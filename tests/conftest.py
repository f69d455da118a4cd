"""
Pytest configuration and shared fixtures.
"""
import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from src.models.period import PeriodInterval
from src.models.profile import CycleProfile
from src.models.symptom import SymptomEntry
from src.services.subscriptions import SubscriptionRegistry
from src.services.user_data import UserDataRepository
from src.utils import clients


class InMemoryDynamo:
    """Dictionary-backed stand-in for DynamoDBClient."""

    def __init__(self):
        self.items: Dict[tuple, Dict[str, Any]] = {}

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        self.items[(item["PK"], item["SK"])] = dict(item)
        return {}

    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        item = self.items.get((key["PK"], key["SK"]))
        return dict(item) if item else None

    def query_items(self, partition_key, partition_value, sort_key_condition=None, scan_forward=True):
        prefix = ""
        if sort_key_condition is not None:
            prefix = sort_key_condition.get_expression()["values"][1]
        matches = [
            dict(item) for (pk, sk), item in self.items.items()
            if pk == partition_value and sk.startswith(prefix)
        ]
        return sorted(matches, key=lambda item: item["SK"], reverse=not scan_forward)

    def update_item(self, key, update_expression, expression_values):
        item = self.items[(key["PK"], key["SK"])]
        for placeholder, value in expression_values.items():
            item[placeholder.lstrip(":")] = value
        return {"Attributes": dict(item)}

    def delete_items(self, keys: List[Dict[str, str]]) -> int:
        for key in keys:
            self.items.pop((key["PK"], key["SK"]), None)
        return len(keys)


@dataclass
class FakeLambdaContext:
    function_name: str = "controlciclo-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:controlciclo-test"
    aws_request_id: str = "52fdfc07-2182-454f-963f-5f0f9a621d72"


@pytest.fixture
def sample_profile() -> CycleProfile:
    """28 day cycle, 5 day period, anchored on 2024-01-01."""
    return CycleProfile(
        cycle_length=28,
        period_length=5,
        last_period_start=date(2024, 1, 1)
    )


@pytest.fixture
def sample_period_logs() -> List[PeriodInterval]:
    return [
        PeriodInterval(start_date=date(2023, 12, 4), end_date=date(2023, 12, 8)),
        PeriodInterval(start_date=date(2023, 11, 6))
    ]


@pytest.fixture
def sample_symptom_entries() -> List[SymptomEntry]:
    return [
        SymptomEntry(date=date(2024, 1, 2), flow="heavy", mood="sad", symptoms={"cramps", "fatigue"}),
        SymptomEntry(date=date(2024, 1, 3), flow="medium", mood="sad", symptoms={"cramps", "headache"}),
        SymptomEntry(date=date(2024, 1, 10), mood="happy", symptoms={"acne"}),
        SymptomEntry(date=date(2024, 1, 20), mood="irritable", symptoms={"cramps", "bloating", "fatigue"}),
    ]


@pytest.fixture
def dynamo() -> InMemoryDynamo:
    return InMemoryDynamo()


@pytest.fixture
def repository(dynamo) -> UserDataRepository:
    """Repository over the in-memory table, installed as the shared client."""
    repo = UserDataRepository(dynamo=dynamo, registry=SubscriptionRegistry())
    clients.set_repository(repo)
    yield repo
    clients.set_repository(None)


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    return FakeLambdaContext()


@pytest.fixture
def api_event():
    """Build an API Gateway proxy event for a user."""
    def _build(method: str, body: Any = None, query: Optional[Dict[str, str]] = None,
               user_id: Optional[str] = "user-123") -> Dict[str, Any]:
        event = {
            "httpMethod": method,
            "headers": {"Content-Type": "application/json"},
            "queryStringParameters": query,
            "body": json.dumps(body) if body is not None else None,
            "requestContext": {}
        }
        if user_id:
            event["requestContext"] = {"authorizer": {"claims": {"sub": user_id}}}
        return event
    return _build
