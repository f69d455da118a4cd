"""
Middleware functions for request processing.
"""
from functools import wraps
from typing import Any, Callable, Dict

from aws_lambda_powertools import Logger

from src.models.session import SessionContext
from src.services.exceptions import UserDataError
from src.utils.api import error_response, get_user_id
from src.utils.clients import get_repository
from src.utils.logging import SERVICE_NAME

logger = Logger(service=SERVICE_NAME)

def with_session(f: Callable) -> Callable:
    """
    Decorator resolving the caller and their profile before the handler runs.

    The wrapped handler receives a SessionContext as third argument. Requests
    without a user ID get a 401, store failures while loading the profile a 500.
    
    Args:
        f: Handler function taking (event, context, session)
        
    Returns:
        Wrapped handler function taking (event, context)
    """
    @wraps(f)
    def wrapped(event: Dict[str, Any], context: Any, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        # Warm containers keep appended keys between invocations
        logger.remove_keys(["user_id"])
        user_id = get_user_id(event)
        if not user_id:
            logger.warning("Request without user ID", extra={
                "event_keys": list(event.keys()) if isinstance(event, dict) else None
            })
            return error_response(401, "Unauthorized")

        try:
            profile = get_repository().get_profile(user_id)
        except UserDataError as e:
            logger.exception("Error loading session", extra={
                "user_id": user_id,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            return error_response(500, "Could not load user data")

        session = SessionContext(user_id=user_id, profile=profile)
        logger.append_keys(user_id=user_id)
        logger.debug("Session resolved", extra={
            "onboarding_complete": session.onboarding_complete
        })
        return f(event, context, session, *args, **kwargs)
    
    return wrapped
