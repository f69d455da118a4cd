"""
Lambda handler for onboarding: creating the cycle profile.
"""
from datetime import date
from typing import Any, Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.models.profile import (
    CycleProfile,
    MIN_CYCLE_LENGTH,
    MAX_CYCLE_LENGTH,
    MIN_PERIOD_LENGTH,
    MAX_PERIOD_LENGTH
)
from src.models.session import SessionContext
from src.services.exceptions import UserDataError
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

class OnboardingRequest(BaseModel):
    """Onboarding answers: cycle length, period length and last period start."""
    cycle_length: int = Field(28, ge=MIN_CYCLE_LENGTH, le=MAX_CYCLE_LENGTH)
    period_length: int = Field(5, ge=MIN_PERIOD_LENGTH, le=MAX_PERIOD_LENGTH)
    last_period_start: date

    @field_validator("last_period_start")
    @classmethod
    def not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("last_period_start cannot be in the future")
        return value

def onboarding_status(session: SessionContext) -> Dict[str, Any]:
    """Describe whether the user has completed onboarding."""
    return {
        "onboarding_complete": session.onboarding_complete,
        "profile": session.profile.model_dump(mode="json") if session.profile else None
    }

@logger.inject_lambda_context
@tracer.capture_lambda_handler
@with_session
def handler(event: Dict, context: LambdaContext, session: SessionContext) -> Dict:
    """
    Handle onboarding requests.

    GET returns the onboarding status, POST stores the profile.
    
    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context
        session: Resolved caller session
        
    Returns:
        API Gateway Lambda proxy response
    """
    method = get_method(event)
    if method == "GET":
        return build_response(200, onboarding_status(session))
    if method != "POST":
        return error_response(405, f"Method {method} not allowed")

    try:
        request = OnboardingRequest(**parse_body(event))
        profile = CycleProfile(
            cycle_length=request.cycle_length,
            period_length=request.period_length,
            last_period_start=request.last_period_start,
            setup_date=date.today()
        )
    except BadRequestError as e:
        return error_response(400, str(e))
    except ValidationError as e:
        return validation_error_response(e)

    try:
        profile = get_repository().save_profile(session.user_id, profile)
    except UserDataError:
        logger.exception("Failed to save onboarding profile")
        return error_response(500, "Could not save profile")

    logger.info("Onboarding completed", extra={"user_id": session.user_id})
    return build_response(201, profile.model_dump(mode="json"))
