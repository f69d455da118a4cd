"""
Lambda handler for logging menstrual periods.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from src.models.period import PeriodInterval
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

@logger.inject_lambda_context
@tracer.capture_lambda_handler
@with_session
def handler(event: Dict, context: LambdaContext, session: SessionContext) -> Dict:
    """
    Handle period log requests.

    POST stores a period ({start_date, end_date?, symptoms?}), GET lists
    logged periods newest first.
    """
    method = get_method(event)
    repository = get_repository()

    try:
        if method == "GET":
            logs = repository.get_period_logs(session.user_id)
            return build_response(200, {
                "period_logs": [log.model_dump(mode="json") for log in logs]
            })
        if method != "POST":
            return error_response(405, f"Method {method} not allowed")

        body = parse_body(event)
        body.pop("id", None)
        log = PeriodInterval(**body)
        log_id = repository.save_period_log(session.user_id, log)
        return build_response(201, {"id": log_id})

    except BadRequestError as e:
        return error_response(400, str(e))
    except ValidationError as e:
        return validation_error_response(e)
    except UserDataError:
        logger.exception("Error handling period log request", extra={"method": method})
        return error_response(500, "Could not access period logs")
