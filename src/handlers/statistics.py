"""
Lambda handler for generating user statistics.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.session import SessionContext
from src.services.exceptions import UserDataError
from src.services.statistics import build_cycle_summary
from src.utils.api import build_response, error_response, get_method
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import with_session

tracer = Tracer()

@logger.inject_lambda_context
@tracer.capture_lambda_handler
@with_session
def handler(event: Dict, context: LambdaContext, session: SessionContext) -> Dict:
    """
    Handle statistics requests.
    
    Args:
        event: API Gateway event
        context: Lambda context
        session: Resolved caller session
        
    Returns:
        API Gateway response with the current phase, predictions and the
        most common symptoms and mood
    """
    method = get_method(event)
    if method != "GET":
        return error_response(405, f"Method {method} not allowed")

    try:
        entries = get_repository().get_symptom_logs(session.user_id)
    except UserDataError:
        logger.exception("Error generating statistics")
        return error_response(500, "Could not load symptom logs")

    summary = build_cycle_summary(session.profile, entries, session.today)
    return build_response(200, {
        "user_id": session.user_id,
        "onboarding_complete": session.onboarding_complete,
        **summary
    })
