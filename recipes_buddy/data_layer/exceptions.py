"""Structured error types for the recipes buddy backend.

Every failure mode that can reach an inbound caller has its own error
class carrying an :class:`ErrorCode`, a human-readable message and a
context dictionary. The HTTP layer maps each class to a status code
(see :mod:`recipes_buddy.api.errors`).

ERROR FLOW:
    Inbound request
        -> ValidationFailureError     (400, never reaches upstream)
    Spoonacular call
        -> RecipeNotFoundError        (404, detail lookup only, not retried)
        -> UpstreamError              (502 for 5xx, otherwise passed through)
    Calorie recalculation
        -> InvalidRecipeStateError    (422, recipe lacks ingredients/calories)

Per-ingredient lookup failures inside the recalculation are absorbed and
never appear here.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Machine-readable error codes."""

    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    RECIPE_NOT_FOUND = "RECIPE_NOT_FOUND"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    INVALID_RECIPE_STATE = "INVALID_RECIPE_STATE"
    CONFIGURATION = "CONFIGURATION"


class RecipesBuddyError(Exception):
    """Base exception for all recipes buddy errors.

    Attributes:
        code: ErrorCode identifying the error type
        message: Human-readable error description
        context: Dictionary of relevant error context
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and CLI output."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
        }


class ValidationFailureError(RecipesBuddyError):
    """Raised when an input is malformed or out of range.

    Context includes:
        - field: Name of the offending field
        - value: The rejected value
    """

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            code=ErrorCode.VALIDATION_FAILURE,
            message=f"Invalid value for '{field}': {reason}",
            context={"field": field, "value": value},
        )
        self.field = field
        self.value = value
        self.reason = reason


class RecipeNotFoundError(RecipesBuddyError):
    """Raised when the provider has no recipe with the requested ID."""

    def __init__(self, recipe_id: int):
        super().__init__(
            code=ErrorCode.RECIPE_NOT_FOUND,
            message=f"Recipe with ID {recipe_id} not found",
            context={"recipe_id": recipe_id},
        )
        self.recipe_id = recipe_id


class UpstreamError(RecipesBuddyError):
    """Raised when the external provider call fails.

    ``status_code`` is the provider's HTTP status (or a synthetic 503/504
    for connection failures and timeouts). ``transient`` marks failures
    that are worth retrying.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        transient: bool = False,
        operation: Optional[str] = None
    ):
        context: Dict[str, Any] = {"status_code": status_code}
        if operation:
            context["operation"] = operation
        super().__init__(
            code=ErrorCode.UPSTREAM_FAILURE,
            message=message,
            context=context,
        )
        self.status_code = status_code
        self.transient = transient
        self.operation = operation

    @property
    def http_status(self) -> int:
        """Status to answer the inbound caller with."""
        return 502 if self.status_code >= 500 else self.status_code


class InvalidRecipeStateError(RecipesBuddyError):
    """Raised when a recipe exists but lacks data needed for a calculation."""

    def __init__(self, recipe_id: int, message: str):
        super().__init__(
            code=ErrorCode.INVALID_RECIPE_STATE,
            message=message,
            context={"recipe_id": recipe_id},
        )
        self.recipe_id = recipe_id


class ConfigurationError(RecipesBuddyError):
    """Raised when required configuration (e.g. the API key) is missing."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            code=ErrorCode.CONFIGURATION,
            message=message,
            context={"setting": setting} if setting else {},
        )
