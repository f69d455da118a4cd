"""
Lambda handler for symptom logging.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from src.models.session import SessionContext
from src.models.symptom import SymptomEntry
from src.services.constants import KNOWN_SYMPTOMS
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

def entry_to_dict(entry: SymptomEntry) -> Dict:
    """Serialize an entry with its symptoms in a stable order."""
    return {**entry.model_dump(mode="json"), "symptoms": sorted(entry.symptoms)}

@logger.inject_lambda_context
@tracer.capture_lambda_handler
@with_session
def handler(event: Dict, context: LambdaContext, session: SessionContext) -> Dict:
    """
    Handle symptom log requests.

    POST stores a log ({date, flow?, mood?, symptoms, notes?}); logs for
    future dates are rejected. GET lists logs newest first.
    """
    method = get_method(event)
    repository = get_repository()

    try:
        if method == "GET":
            entries = repository.get_symptom_logs(session.user_id)
            return build_response(200, {
                "symptom_logs": [entry_to_dict(entry) for entry in entries],
                "known_symptoms": KNOWN_SYMPTOMS
            })
        if method != "POST":
            return error_response(405, f"Method {method} not allowed")

        body = parse_body(event)
        body.pop("id", None)
        entry = SymptomEntry(**body)
        if entry.date > session.today:
            return error_response(400, "Symptoms cannot be logged for a future date")

        log_id = repository.save_symptom_log(session.user_id, entry)
        return build_response(201, {"id": log_id})

    except BadRequestError as e:
        return error_response(400, str(e))
    except ValidationError as e:
        return validation_error_response(e)
    except UserDataError:
        logger.exception("Error handling symptom log request", extra={"method": method})
        return error_response(500, "Could not access symptom logs")
