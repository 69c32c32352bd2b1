from typing import Any, Dict, List, Optional
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """An error that maps directly onto an HTTP error response.

    The response body is ``{"error": ..., "message": ...}`` plus any extra
    fields; ``message`` is omitted when not given.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        message: Optional[str] = None,
        **extra: Any,
    ):
        super().__init__(message or error)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        body.update(self.extra)
        return body


class DatabaseNotConfiguredError(ServiceError):
    def __init__(self):
        super().__init__(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database not configured",
            "Database credentials not available",
        )


class NotFoundError(ServiceError):
    def __init__(self, error: str):
        super().__init__(status.HTTP_404_NOT_FOUND, error)


class DiagnosisGenerationError(Exception):
    """Raised when the LLM could not produce a diagnosis."""


# Field-specific messages for out-of-range values
RANGE_ERRORS = {
    "age": "Invalid age. Must be between 0 and 120 years.",
    "weight": "Invalid weight. Must be between 0.5 and 500 kg.",
}

RANGE_ERROR_TYPES = {"greater_than_equal", "less_than_equal"}

# Blank strings are rejected as too short and reported as missing
MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def _field_name(loc) -> Optional[str]:
    # loc looks like ("body", "fullName"); the first element is the source
    if len(loc) >= 2 and loc[0] == "body":
        return str(loc[1])
    return None


def validation_error_body(errors: List[Dict[str, Any]], required: List[str]) -> Dict[str, Any]:
    """Collapse pydantic errors into the API's 400 response body."""
    missing = [e for e in errors if e.get("type") in MISSING_ERROR_TYPES]
    if required and missing:
        return {"error": "Missing required fields", "required": required}

    for e in errors:
        field = _field_name(e.get("loc", ()))
        if field in RANGE_ERRORS and e.get("type") in RANGE_ERROR_TYPES:
            return {"error": RANGE_ERRORS[field]}

    first = errors[0] if errors else {}
    field = _field_name(first.get("loc", ()))
    message = first.get("msg", "Invalid input")
    if field:
        message = f"{field}: {message}"
    return {"error": "Invalid request", "message": message}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer request validation failures with 400 instead of FastAPI's 422."""
    endpoint = request.scope.get("endpoint")
    required = getattr(endpoint, "required_fields", [])
    body = validation_error_body(list(exc.errors()), list(required))
    logger.debug(f"Rejected request to {request.url.path}: {body}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)
