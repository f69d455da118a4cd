"""
Lambda handler for settings: cycle parameters, data export and deletion.
"""
from datetime import date
from typing import Dict, Optional

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from src.models.session import SessionContext
from src.services.exceptions import ProfileNotFoundError, UserDataError
from src.utils.api import (
    BadRequestError,
    build_response,
    error_response,
    get_method,
    parse_body,
    validation_error_response
)
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import with_session

tracer = Tracer()

class SettingsUpdateRequest(BaseModel):
    """Partial profile update; range checks happen on the merged profile."""
    cycle_length: Optional[int] = None
    period_length: Optional[int] = None
    last_period_start: Optional[date] = None

    @field_validator("last_period_start")
    @classmethod
    def not_in_future(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("last_period_start cannot be in the future")
        return value

    @model_validator(mode="after")
    def require_a_field(self) -> "SettingsUpdateRequest":
        if self.cycle_length is None and self.period_length is None and self.last_period_start is None:
            raise ValueError("At least one setting must be provided")
        return self

def export_filename(today: date) -> str:
    return f"cycle-tracker-data-{today.isoformat()}.json"

def update_settings(event: Dict, session: SessionContext) -> Dict:
    request = SettingsUpdateRequest(**parse_body(event))
    profile = get_repository().update_settings(
        session.user_id,
        cycle_length=request.cycle_length,
        period_length=request.period_length,
        last_period_start=request.last_period_start
    )
    return build_response(200, profile.model_dump(mode="json"))

def export_data(session: SessionContext) -> Dict:
    data = get_repository().export_user_data(session.user_id)
    logger.info("Exported user data", extra={
        "period_logs": len(data["period_logs"]),
        "symptom_logs": len(data["symptom_logs"])
    })
    return build_response(200, data, headers={
        "Content-Disposition": f'attachment; filename="{export_filename(session.today)}"'
    })

def delete_data(session: SessionContext) -> Dict:
    deleted = get_repository().delete_all_user_data(session.user_id)
    return build_response(200, {"deleted": deleted})

@logger.inject_lambda_context
@tracer.capture_lambda_handler
@with_session
def handler(event: Dict, context: LambdaContext, session: SessionContext) -> Dict:
    """
    Handle settings requests.

    PUT updates cycle settings, GET exports every stored record as a JSON
    download and DELETE removes all of the user's data.
    
    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context
        session: Resolved caller session
        
    Returns:
        API Gateway Lambda proxy response
    """
    method = get_method(event)
    try:
        if method == "PUT":
            return update_settings(event, session)
        if method == "GET":
            return export_data(session)
        if method == "DELETE":
            return delete_data(session)
        return error_response(405, f"Method {method} not allowed")

    except BadRequestError as e:
        return error_response(400, str(e))
    except ValidationError as e:
        return validation_error_response(e)
    except ProfileNotFoundError as e:
        return error_response(404, str(e))
    except UserDataError:
        logger.exception("Error handling settings request", extra={"method": method})
        return error_response(500, "Could not access user data")
