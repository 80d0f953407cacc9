"""Exception handlers mapping the error taxonomy to HTTP responses.

Every 4xx/5xx answer carries the same body::

    {"timestamp": ..., "status": 404, "error": "Not Found",
     "message": "Recipe with ID 7 not found", "path": "/api/recipes/7"}
"""

import logging
from datetime import datetime
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipes_buddy.data_layer.exceptions import (
    InvalidRecipeStateError,
    RecipeNotFoundError,
    UpstreamError,
    ValidationFailureError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_body(status: int, error: str, message: str, path: str, **extra: Any) -> Dict[str, Any]:
    body = {
        "timestamp": datetime.now().isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "path": path,
    }
    body.update(extra)
    return body


def error_response(
    request: Request,
    status: int,
    error: str,
    message: str,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any
) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=error_body(status, error, message, request.url.path, **extra),
        headers=headers,
    )


def handle_recipe_not_found(request: Request, exc: RecipeNotFoundError) -> JSONResponse:
    logger.error(f"Recipe not found: {exc.message}")
    return error_response(request, 404, "Not Found", exc.message)


def handle_upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(f"Spoonacular API error: {exc.message} (status={exc.status_code})")
    return error_response(request, exc.http_status, "External API Error", exc.message)


def handle_invalid_state(request: Request, exc: InvalidRecipeStateError) -> JSONResponse:
    logger.warning(f"Recipe {exc.recipe_id} cannot be processed: {exc.message}")
    return error_response(request, 422, "Unprocessable Entity", exc.message)


def handle_validation_failure(request: Request, exc: ValidationFailureError) -> JSONResponse:
    logger.error(f"Validation error: {exc.message}")
    return error_response(
        request, 400, "Validation Failed", "Invalid input parameters",
        errors={exc.field: exc.reason},
    )


def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        # Drop the "query"/"path"/"body" prefix
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        errors[field or "request"] = err.get("msg", "invalid value")
    logger.error(f"Validation error: {errors}")
    return error_response(
        request, 400, "Validation Failed", "Invalid input parameters", errors=errors
    )


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    message = exc.detail if isinstance(exc.detail, str) else phrase
    return error_response(
        request, exc.status_code, phrase, message, headers=getattr(exc, "headers", None)
    )


def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    # Details go to the log only
    logger.error(f"Unexpected error occurred on {request.url.path}", exc_info=exc)
    return error_response(request, 500, "Internal Server Error", GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on *app*."""
    app.add_exception_handler(RecipeNotFoundError, handle_recipe_not_found)
    app.add_exception_handler(UpstreamError, handle_upstream_error)
    app.add_exception_handler(InvalidRecipeStateError, handle_invalid_state)
    app.add_exception_handler(ValidationFailureError, handle_validation_failure)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
