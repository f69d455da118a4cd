"""
User data repository.

This module stores and retrieves a user's cycle profile, period logs and
symptom logs in DynamoDB, and pushes fresh snapshots to registered
subscribers after every write.

Typical usage:
    repository = UserDataRepository()
    repository.save_profile(user_id, profile)
    unsubscribe = repository.subscribe_to_period_logs(user_id, on_logs)
    repository.save_period_log(user_id, PeriodInterval(start_date=date.today()))
"""
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from src.models.period import PeriodInterval
from src.models.profile import CycleProfile
from src.models.symptom import SymptomEntry
from src.services.exceptions import ProfileNotFoundError, UserDataError
from src.services.subscriptions import SubscriptionRegistry, Unsubscribe
from src.utils.dynamo import (
    get_dynamo,
    create_pk,
    create_period_sk,
    create_symptom_sk,
    PROFILE_SK,
    PERIOD_SK_PREFIX,
    SYMPTOM_SK_PREFIX
)
from src.utils.logging import SERVICE_NAME

logger = Logger(service=SERVICE_NAME)

PROFILE_TOPIC = "profile"
PERIOD_LOGS_TOPIC = "period_logs"
SYMPTOM_LOGS_TOPIC = "symptom_logs"

STORE_ERRORS = (BotoCoreError, ClientError)

_registry = None

def get_registry() -> SubscriptionRegistry:
    """Get or create the process-wide subscription registry."""
    global _registry
    if _registry is None:
        _registry = SubscriptionRegistry()
    return _registry

def _strip_keys(item: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in item.items() if k not in ("PK", "SK")}

class UserDataRepository:
    """Data access for one table holding every user's records."""

    def __init__(self, dynamo=None, registry: Optional[SubscriptionRegistry] = None):
        """
        Initialize repository.

        Args:
            dynamo: DynamoDB client, defaults to the shared instance
            registry: Subscription registry, defaults to the shared instance
        """
        self.dynamo = dynamo or get_dynamo()
        self.registry = registry or get_registry()

    # Profile

    def save_profile(self, user_id: str, profile: CycleProfile) -> CycleProfile:
        """
        Create or overwrite the user's cycle profile.

        A missing setup_date is filled with today's date.

        Raises:
            UserDataError: If the profile cannot be written
        """
        if profile.setup_date is None:
            profile = profile.model_copy(update={"setup_date": date.today()})
        item = {
            "PK": create_pk(user_id),
            "SK": PROFILE_SK,
            **profile.model_dump(mode="json", exclude_none=True)
        }
        try:
            self.dynamo.put_item(item)
        except STORE_ERRORS as e:
            self._log_store_error("Error saving profile", user_id, e)
            raise UserDataError(f"Failed to save profile: {str(e)}")

        logger.info("Saved cycle profile", extra={
            "user_id": user_id,
            "cycle_length": profile.cycle_length,
            "period_length": profile.period_length
        })
        self._publish(user_id, PROFILE_TOPIC, profile)
        return profile

    def get_profile(self, user_id: str) -> Optional[CycleProfile]:
        """
        Get the user's cycle profile.

        Returns:
            CycleProfile if the user has onboarded, None otherwise

        Raises:
            UserDataError: If the store cannot be read
        """
        try:
            item = self.dynamo.get_item({"PK": create_pk(user_id), "SK": PROFILE_SK})
        except STORE_ERRORS as e:
            self._log_store_error("Error reading profile", user_id, e)
            raise UserDataError(f"Failed to read profile: {str(e)}")

        if not item:
            return None
        return CycleProfile(**_strip_keys(item))

    def update_settings(
        self,
        user_id: str,
        cycle_length: Optional[int] = None,
        period_length: Optional[int] = None,
        last_period_start: Optional[date] = None
    ) -> CycleProfile:
        """
        Update selected profile fields.

        The merged profile is validated before anything is written, so an
        update that breaks period_length < cycle_length leaves the stored
        profile untouched.

        Returns:
            The updated profile

        Raises:
            ProfileNotFoundError: If the user has no profile yet
            pydantic.ValidationError: If the merged profile is invalid
            UserDataError: If the store cannot be written
        """
        current = self.get_profile(user_id)
        if current is None:
            raise ProfileNotFoundError(f"No profile found for user {user_id}")

        changes = {
            name: value for name, value in (
                ("cycle_length", cycle_length),
                ("period_length", period_length),
                ("last_period_start", last_period_start)
            ) if value is not None
        }
        if not changes:
            return current
        updated = CycleProfile(**{**current.model_dump(), **changes})

        values = updated.model_dump(mode="json", include=set(changes))
        update_expression = "SET " + ", ".join(f"{name} = :{name}" for name in values)
        try:
            self.dynamo.update_item(
                key={"PK": create_pk(user_id), "SK": PROFILE_SK},
                update_expression=update_expression,
                expression_values={f":{name}": value for name, value in values.items()}
            )
        except STORE_ERRORS as e:
            self._log_store_error("Error updating settings", user_id, e)
            raise UserDataError(f"Failed to update settings: {str(e)}")

        logger.info("Updated cycle settings", extra={
            "user_id": user_id,
            "fields": sorted(changes)
        })
        self._publish(user_id, PROFILE_TOPIC, updated)
        return updated

    # Period logs

    def save_period_log(self, user_id: str, log: PeriodInterval) -> str:
        """
        Store a new period log.

        Returns:
            Identifier of the created log

        Raises:
            UserDataError: If the log cannot be written
        """
        log_id = uuid4().hex
        item = {
            "PK": create_pk(user_id),
            "SK": create_period_sk(log.start_date.isoformat(), log_id),
            **log.model_dump(mode="json", exclude_none=True),
            "id": log_id
        }
        try:
            self.dynamo.put_item(item)
        except STORE_ERRORS as e:
            self._log_store_error("Error saving period log", user_id, e)
            raise UserDataError(f"Failed to save period log: {str(e)}")

        logger.info("Saved period log", extra={"user_id": user_id, "log_id": log_id})
        if self._has_subscribers(user_id, PERIOD_LOGS_TOPIC):
            self._publish(user_id, PERIOD_LOGS_TOPIC, self.get_period_logs(user_id))
        return log_id

    def get_period_logs(self, user_id: str) -> List[PeriodInterval]:
        """Get period logs, most recent start date first."""
        items = self._query_prefix(user_id, PERIOD_SK_PREFIX)
        return [PeriodInterval(**_strip_keys(item)) for item in items]

    # Symptom logs

    def save_symptom_log(self, user_id: str, entry: SymptomEntry) -> str:
        """
        Store a new symptom log.

        Logs on the same date are kept side by side.

        Returns:
            Identifier of the created log

        Raises:
            UserDataError: If the log cannot be written
        """
        log_id = uuid4().hex
        data = entry.model_dump(mode="json", exclude_none=True)
        data["symptoms"] = sorted(entry.symptoms)
        item = {
            "PK": create_pk(user_id),
            "SK": create_symptom_sk(entry.date.isoformat(), log_id),
            **data,
            "id": log_id
        }
        try:
            self.dynamo.put_item(item)
        except STORE_ERRORS as e:
            self._log_store_error("Error saving symptom log", user_id, e)
            raise UserDataError(f"Failed to save symptom log: {str(e)}")

        logger.info("Saved symptom log", extra={"user_id": user_id, "log_id": log_id})
        if self._has_subscribers(user_id, SYMPTOM_LOGS_TOPIC):
            self._publish(user_id, SYMPTOM_LOGS_TOPIC, self.get_symptom_logs(user_id))
        return log_id

    def get_symptom_logs(self, user_id: str) -> List[SymptomEntry]:
        """Get symptom logs, most recent date first."""
        items = self._query_prefix(user_id, SYMPTOM_SK_PREFIX)
        return [SymptomEntry(**_strip_keys(item)) for item in items]

    # Settings screen

    def delete_all_user_data(self, user_id: str) -> int:
        """
        Delete the profile and every log of a user.

        Returns:
            Number of records deleted

        Raises:
            UserDataError: If the store cannot be read or written
        """
        try:
            items = self.dynamo.query_items(
                partition_key="PK",
                partition_value=create_pk(user_id)
            )
            deleted = self.dynamo.delete_items([
                {"PK": item["PK"], "SK": item["SK"]} for item in items
            ])
        except STORE_ERRORS as e:
            self._log_store_error("Error deleting user data", user_id, e)
            raise UserDataError(f"Failed to delete user data: {str(e)}")

        logger.info("Deleted all user data", extra={"user_id": user_id, "deleted": deleted})
        self._publish(user_id, PROFILE_TOPIC, None)
        self._publish(user_id, PERIOD_LOGS_TOPIC, [])
        self._publish(user_id, SYMPTOM_LOGS_TOPIC, [])
        return deleted

    def export_user_data(self, user_id: str) -> Dict[str, Any]:
        """
        Collect everything stored for a user as JSON-safe data.

        Returns:
            Dictionary containing:
            - user_data: Profile or None
            - period_logs: Period logs with ids
            - symptom_logs: Symptom logs with ids
            - export_date: UTC timestamp of the export
        """
        profile = self.get_profile(user_id)
        return {
            "user_data": profile.model_dump(mode="json") if profile else None,
            "period_logs": [
                log.model_dump(mode="json") for log in self.get_period_logs(user_id)
            ],
            "symptom_logs": [
                {**entry.model_dump(mode="json"), "symptoms": sorted(entry.symptoms)}
                for entry in self.get_symptom_logs(user_id)
            ],
            "export_date": datetime.now(timezone.utc).isoformat()
        }

    # Live updates

    def subscribe_to_profile(
        self,
        user_id: str,
        callback: Callable[[Optional[CycleProfile]], None]
    ) -> Unsubscribe:
        """Register for profile snapshots; the current one is delivered at once."""
        return self._subscribe(user_id, PROFILE_TOPIC, callback, self.get_profile)

    def subscribe_to_period_logs(
        self,
        user_id: str,
        callback: Callable[[List[PeriodInterval]], None]
    ) -> Unsubscribe:
        """Register for period log snapshots; the current one is delivered at once."""
        return self._subscribe(user_id, PERIOD_LOGS_TOPIC, callback, self.get_period_logs)

    def subscribe_to_symptom_logs(
        self,
        user_id: str,
        callback: Callable[[List[SymptomEntry]], None]
    ) -> Unsubscribe:
        """Register for symptom log snapshots; the current one is delivered at once."""
        return self._subscribe(user_id, SYMPTOM_LOGS_TOPIC, callback, self.get_symptom_logs)

    def _subscribe(self, user_id, topic, callback, load) -> Unsubscribe:
        snapshot = load(user_id)
        unsubscribe = self.registry.subscribe((user_id, topic), callback)
        callback(snapshot)
        return unsubscribe

    def _publish(self, user_id: str, topic: str, snapshot: Any) -> None:
        self.registry.publish((user_id, topic), snapshot)

    def _has_subscribers(self, user_id: str, topic: str) -> bool:
        return self.registry.subscriber_count((user_id, topic)) > 0

    def _query_prefix(self, user_id: str, prefix: str) -> List[Dict[str, Any]]:
        try:
            return self.dynamo.query_items(
                partition_key="PK",
                partition_value=create_pk(user_id),
                sort_key_condition=Key("SK").begins_with(prefix),
                scan_forward=False
            )
        except STORE_ERRORS as e:
            self._log_store_error("Error querying user data", user_id, e, prefix=prefix)
            raise UserDataError(f"Failed to read user data: {str(e)}")

    def _log_store_error(self, message: str, user_id: str, error: Exception, **extra) -> None:
        logger.error(message, extra={
            "user_id": user_id,
            "error": str(error),
            "error_type": error.__class__.__name__,
            **extra
        })
