"""
API Gateway request parsing and response helpers.
"""
import json
from typing import Any, Dict, Optional

from pydantic import ValidationError

JSON_HEADERS = {"Content-Type": "application/json"}

class BadRequestError(Exception):
    """Raised when a request body or query string cannot be used."""
    pass

def build_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Build an API Gateway Lambda proxy response.

    Args:
        status_code: HTTP status code
        body: JSON-serializable response body
        headers: Extra headers merged over the JSON content type

    Returns:
        API Gateway Lambda proxy response
    """
    return {
        "statusCode": status_code,
        "headers": {**JSON_HEADERS, **(headers or {})},
        "body": json.dumps(body, default=str),
        "isBase64Encoded": False
    }

def error_response(status_code: int, message: str, details: Any = None) -> Dict[str, Any]:
    """Build an error response with an optional details list."""
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return build_response(status_code, body)

def validation_error_response(error: ValidationError) -> Dict[str, Any]:
    """Turn a pydantic ValidationError into a 400 response."""
    details = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]
    return error_response(400, "Invalid request", details)

def get_user_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract the caller's user ID.

    Uses the Cognito authorizer claims when present, then the X-User-Id header.
    """
    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    if claims.get("sub"):
        return str(claims["sub"])

    headers = event.get("headers") or {}
    for name, value in headers.items():
        if name.lower() == "x-user-id" and value:
            return str(value)
    return None

def get_method(event: Dict[str, Any]) -> str:
    """HTTP method of a REST or HTTP API event."""
    method = event.get("httpMethod")
    if not method:
        request_context = event.get("requestContext") or {}
        method = (request_context.get("http") or {}).get("method", "")
    return method.upper()

def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse the JSON body of a request.

    Raises:
        BadRequestError: If the body is missing, not JSON, or not an object
    """
    body = event.get("body")
    if body is None or body == "":
        raise BadRequestError("Request body is required")
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        raise BadRequestError("Request body must be valid JSON")
    if not isinstance(parsed, dict):
        raise BadRequestError("Request body must be a JSON object")
    return parsed

def get_query_params(event: Dict[str, Any]) -> Dict[str, str]:
    """Query string parameters, empty when absent."""
    return event.get("queryStringParameters", {}) or {}
