"""
Lambda handler for the calendar month view.
"""
from datetime import date
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.session import SessionContext
from src.services.calendar import build_month
from src.services.exceptions import UserDataError
from src.utils.api import build_response, error_response, get_method, get_query_params
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import with_session

tracer = Tracer()

@logger.inject_lambda_context
@tracer.capture_lambda_handler
@with_session
def handler(event: Dict, context: LambdaContext, session: SessionContext) -> Dict:
    """
    Handle calendar month requests.

    Query parameters year and month default to the current month. Before
    onboarding every day is returned without flags and the countdown is null.
    
    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context
        session: Resolved caller session
        
    Returns:
        API Gateway Lambda proxy response
    """
    method = get_method(event)
    if method != "GET":
        return error_response(405, f"Method {method} not allowed")

    params = get_query_params(event)
    try:
        year = int(params.get("year", session.today.year))
        month = int(params.get("month", session.today.month))
        if not 1 <= month <= 12 or not date.min.year <= year <= date.max.year:
            raise ValueError(f"Invalid month {year}-{month}")
    except ValueError as e:
        return error_response(400, str(e))

    try:
        period_logs = get_repository().get_period_logs(session.user_id) if session.profile else []
    except UserDataError:
        logger.exception("Failed to load period logs")
        return error_response(500, "Could not load period logs")

    month_view = build_month(year, month, session.profile, period_logs, session.today)
    return build_response(200, {
        "onboarding_complete": session.onboarding_complete,
        **month_view.to_dict()
    })
