"""Standard response envelope shared by every endpoint."""
from typing import Any, Optional

from flask import jsonify

from hashvault.models.api_schemas import ApiResponse, ErrorInfo


def _envelope(response: ApiResponse) -> dict:
    body = response.to_json()
    # Absent rather than null
    for key in ('data', 'error'):
        if body.get(key) is None:
            body.pop(key, None)
    return body


def success_response(message: str, data: Any = None, status_code: int = 200):
    """
    Build a success envelope.

    Args:
        message: Human-readable summary
        data: JSON-serializable payload (pydantic models are dumped with camelCase keys)
        status_code: HTTP status

    Returns:
        (Flask response, status) tuple
    """
    response = ApiResponse(success=True, message=message, data=data)
    return jsonify(_envelope(response)), status_code


def error_response(message: str, code: str, details: Optional[Any] = None, status_code: int = 500):
    response = ApiResponse(
        success=False,
        message=message,
        error=ErrorInfo(code=code, details=details)
    )
    return jsonify(_envelope(response)), status_code
