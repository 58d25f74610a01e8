"""
Error types and the error envelope shared by every endpoint
"""

from enum import Enum
from typing import Optional

from fastapi.responses import JSONResponse


class GatewayError(Exception):
    """Base class for failures raised inside the search pipeline"""


class QueryValidationError(GatewayError):
    """The search request cannot be translated into a source query"""


class UpstreamFetchError(GatewayError):
    """An outbound call failed or the source reported an error"""


class ResponseShapeError(GatewayError):
    """The source XML does not have the structure we map from"""


class ErrorType(str, Enum):
    BAD_REQUEST = "BadRequest"
    NOT_FOUND = "NotFound"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    INTERNAL_SERVER_ERROR = "InternalServerError"


STATUS_CODES = {
    ErrorType.BAD_REQUEST: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.METHOD_NOT_ALLOWED: 405,
    ErrorType.INTERNAL_SERVER_ERROR: 500,
}

DEFAULT_MESSAGES = {
    ErrorType.BAD_REQUEST: "Invalid search request",
    ErrorType.NOT_FOUND: "Not found",
    ErrorType.METHOD_NOT_ALLOWED: "Method not allowed, use POST",
    ErrorType.INTERNAL_SERVER_ERROR: "Unknown error occurred",
}


def error_type_for_status(status_code: int) -> ErrorType:
    for error_type, code in STATUS_CODES.items():
        if code == status_code:
            return error_type
    return ErrorType.INTERNAL_SERVER_ERROR


def create_error_response(error_type: ErrorType, message: Optional[str] = None) -> JSONResponse:
    """Build the `{errorType, body: {message}}` envelope with the matching status code"""
    return JSONResponse(
        status_code=STATUS_CODES[error_type],
        content={
            "errorType": error_type.value,
            "body": {"message": message or DEFAULT_MESSAGES[error_type]},
        },
    )
