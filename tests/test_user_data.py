"""
Tests for the user data repository.
"""
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import Mock, patch

from botocore.exceptions import ClientError
from pydantic import ValidationError

from src.models.period import PeriodInterval
from src.models.profile import CycleProfile
from src.models.symptom import SymptomEntry
from src.services.exceptions import ProfileNotFoundError, UserDataError
from src.services.subscriptions import SubscriptionRegistry
from src.services.user_data import UserDataRepository

USER = "user-123"

def _client_error(operation):
    return ClientError(
        {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
        operation
    )

def test_default_clients_are_shared():
    """Test repository picks up the shared DynamoDB client."""
    with patch('src.services.user_data.get_dynamo') as mock_get_dynamo:
        mock_dynamo = Mock()
        mock_get_dynamo.return_value = mock_dynamo
        repo = UserDataRepository()
    assert repo.dynamo is mock_dynamo
    assert isinstance(repo.registry, SubscriptionRegistry)

def test_save_and_get_profile(repository, dynamo, sample_profile):
    saved = repository.save_profile(USER, sample_profile)

    assert saved.setup_date == date.today()
    stored = dynamo.items[("USER#user-123", "PROFILE")]
    assert stored["last_period_start"] == "2024-01-01"
    assert stored["cycle_length"] == 28
    assert repository.get_profile(USER) == saved

def test_get_profile_missing(repository):
    assert repository.get_profile("nobody") is None

def test_get_profile_from_dynamo_numbers(repository, dynamo):
    dynamo.put_item({
        "PK": "USER#user-123",
        "SK": "PROFILE",
        "cycle_length": Decimal("30"),
        "period_length": Decimal("4"),
        "last_period_start": "2024-03-01",
        "setup_date": "2024-03-02"
    })
    profile = repository.get_profile(USER)
    assert profile.cycle_length == 30
    assert profile.period_length == 4

def test_update_settings(repository, sample_profile):
    repository.save_profile(USER, sample_profile)

    updated = repository.update_settings(USER, cycle_length=30, period_length=6)

    assert updated.cycle_length == 30
    assert updated.period_length == 6
    assert updated.last_period_start == date(2024, 1, 1)
    assert repository.get_profile(USER) == updated

def test_update_settings_without_changes_returns_current(repository, dynamo, sample_profile):
    saved = repository.save_profile(USER, sample_profile)
    assert repository.update_settings(USER) == saved

def test_update_settings_invalid_leaves_profile(repository, sample_profile):
    saved = repository.save_profile(USER, sample_profile)

    with pytest.raises(ValidationError):
        repository.update_settings(USER, cycle_length=40)

    assert repository.get_profile(USER) == saved

def test_update_settings_without_profile(repository):
    with pytest.raises(ProfileNotFoundError):
        repository.update_settings(USER, cycle_length=30)

def test_period_logs_newest_first(repository):
    first_id = repository.save_period_log(USER, PeriodInterval(start_date=date(2024, 1, 1)))
    second_id = repository.save_period_log(
        USER, PeriodInterval(start_date=date(2024, 1, 29), end_date=date(2024, 2, 2), symptoms=["cramps"])
    )

    logs = repository.get_period_logs(USER)

    assert [log.id for log in logs] == [second_id, first_id]
    assert logs[0].end_date == date(2024, 2, 2)
    assert logs[0].symptoms == ["cramps"]
    assert logs[1].end_date is None

def test_symptom_logs_keep_duplicates(repository):
    entry = SymptomEntry(date=date(2024, 1, 2), flow="light", symptoms={"cramps"})
    repository.save_symptom_log(USER, entry)
    repository.save_symptom_log(USER, entry)
    repository.save_symptom_log(USER, SymptomEntry(date=date(2024, 1, 5), mood="happy"))

    logs = repository.get_symptom_logs(USER)

    assert len(logs) == 3
    assert logs[0].date == date(2024, 1, 5)
    assert logs[1].symptoms == frozenset({"cramps"})
    assert logs[1].id != logs[2].id

def test_symptom_log_item_is_plain_data(repository, dynamo):
    repository.save_symptom_log(
        USER, SymptomEntry(date=date(2024, 1, 2), symptoms={"headache", "acne"}, notes="long day")
    )
    (item,) = dynamo.query_items("PK", "USER#user-123")
    assert item["symptoms"] == ["acne", "headache"]
    assert item["SK"].startswith("SYMPTOM#2024-01-02#")
    assert "flow" not in item

def test_records_are_scoped_per_user(repository, sample_profile):
    repository.save_profile(USER, sample_profile)
    repository.save_period_log("other", PeriodInterval(start_date=date(2024, 1, 1)))
    assert repository.get_period_logs(USER) == []

def test_delete_all_user_data(repository, dynamo, sample_profile):
    repository.save_profile(USER, sample_profile)
    repository.save_period_log(USER, PeriodInterval(start_date=date(2024, 1, 1)))
    repository.save_symptom_log(USER, SymptomEntry(date=date(2024, 1, 2)))
    repository.save_profile("other", sample_profile)

    deleted = repository.delete_all_user_data(USER)

    assert deleted == 3
    assert repository.get_profile(USER) is None
    assert repository.get_period_logs(USER) == []
    assert repository.get_symptom_logs(USER) == []
    assert repository.get_profile("other") is not None

def test_export_user_data(repository, sample_profile):
    repository.save_profile(USER, sample_profile)
    repository.save_period_log(USER, PeriodInterval(start_date=date(2024, 1, 1)))
    repository.save_symptom_log(USER, SymptomEntry(date=date(2024, 1, 2), symptoms={"fatigue", "acne"}))

    export = repository.export_user_data(USER)

    assert export["user_data"]["cycle_length"] == 28
    assert export["user_data"]["last_period_start"] == "2024-01-01"
    assert export["period_logs"][0]["start_date"] == "2024-01-01"
    assert export["period_logs"][0]["id"]
    assert export["symptom_logs"][0]["symptoms"] == ["acne", "fatigue"]
    assert export["export_date"]

def test_export_without_data(repository):
    export = repository.export_user_data(USER)
    assert export["user_data"] is None
    assert export["period_logs"] == []
    assert export["symptom_logs"] == []

def test_subscribe_delivers_current_snapshot_then_updates(repository, sample_profile):
    snapshots = []
    unsubscribe = repository.subscribe_to_profile(USER, snapshots.append)

    repository.save_profile(USER, sample_profile)
    repository.update_settings(USER, cycle_length=30)
    unsubscribe()
    repository.update_settings(USER, cycle_length=31)

    assert snapshots[0] is None
    assert snapshots[1].cycle_length == 28
    assert snapshots[2].cycle_length == 30
    assert len(snapshots) == 3

def test_subscribe_to_logs(repository):
    period_snapshots = []
    symptom_snapshots = []
    repository.subscribe_to_period_logs(USER, period_snapshots.append)
    repository.subscribe_to_symptom_logs(USER, symptom_snapshots.append)

    repository.save_period_log(USER, PeriodInterval(start_date=date(2024, 1, 1)))
    repository.save_symptom_log(USER, SymptomEntry(date=date(2024, 1, 2)))
    repository.delete_all_user_data(USER)

    assert [len(snapshot) for snapshot in period_snapshots] == [0, 1, 0]
    assert [len(snapshot) for snapshot in symptom_snapshots] == [0, 1, 0]

def test_store_errors_are_wrapped(sample_profile):
    mock_dynamo = Mock()
    mock_dynamo.put_item.side_effect = _client_error("PutItem")
    mock_dynamo.get_item.side_effect = _client_error("GetItem")
    mock_dynamo.query_items.side_effect = _client_error("Query")
    repo = UserDataRepository(dynamo=mock_dynamo, registry=SubscriptionRegistry())

    with pytest.raises(UserDataError, match="Failed to save profile"):
        repo.save_profile(USER, sample_profile)
    with pytest.raises(UserDataError, match="Failed to read profile"):
        repo.get_profile(USER)
    with pytest.raises(UserDataError, match="Failed to read user data"):
        repo.get_period_logs(USER)
    with pytest.raises(UserDataError, match="Failed to delete user data"):
        repo.delete_all_user_data(USER)

def test_update_error_is_wrapped(sample_profile):
    mock_dynamo = Mock()
    mock_dynamo.get_item.return_value = {
        "PK": "USER#user-123", "SK": "PROFILE", **sample_profile.model_dump(mode="json")
    }
    mock_dynamo.update_item.side_effect = _client_error("UpdateItem")
    repo = UserDataRepository(dynamo=mock_dynamo, registry=SubscriptionRegistry())

    with pytest.raises(UserDataError, match="Failed to update settings"):
        repo.update_settings(USER, period_length=4)

def test_failed_subscribe_leaves_no_subscriber():
    mock_dynamo = Mock()
    mock_dynamo.get_item.side_effect = _client_error("GetItem")
    registry = SubscriptionRegistry()
    repo = UserDataRepository(dynamo=mock_dynamo, registry=registry)
    callback = Mock()

    with pytest.raises(UserDataError):
        repo.subscribe_to_profile(USER, callback)

    assert registry.subscriber_count((USER, "profile")) == 0
    registry.publish((USER, "profile"), None)
    callback.assert_not_called()
