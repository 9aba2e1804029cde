# backend/core/error_handling.py

"""
Error handling utilities for API routes.

Services raise the APIError family below; routes wrap their handlers in
``handle_api_errors`` so every failure leaves the API with the same shape.
"""

from typing import Callable, Dict, Any, Optional
from functools import wraps
import logging
import inspect
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from pydantic import ValidationError
import traceback

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {"message": self.message, "details": self.details}


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} with identifier {identifier} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "identifier": str(identifier)},
        )


class ConflictError(APIError):
    """Resource conflict error"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message, status_code=status.HTTP_409_CONFLICT, details=details
        )


class APIValidationError(APIError):
    """Input validation error - named to avoid the Pydantic collision"""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"validation_errors": errors} if errors else {},
        )


class PersistenceError(APIError):
    """A write to the data store failed; ``step`` names the failing stage"""

    def __init__(
        self, message: str, step: str, details: Optional[Dict[str, Any]] = None
    ):
        self.step = step
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"step": step, "retryable": True, **(details or {})},
        )


class ConfigurationError(APIError):
    """A collaborator (data store, identity provider) is unreachable or unconfigured"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
        )


def handle_api_errors(func: Callable) -> Callable:
    """
    Decorator to handle common API errors with proper status codes and messages.
    Handles both async and sync functions.

    Usage:
        @router.get("/items/{item_id}")
        @handle_api_errors
        async def get_item(item_id: int, db: Session = Depends(get_db)):
            ...
    """

    def handle_exception(e: Exception, func_name: str) -> None:
        """Common exception handling logic"""
        if isinstance(e, APIError):
            log = logger.error if e.status_code >= 500 else logger.warning
            log(
                f"API Error in {func_name}: {e.message}",
                extra={"status_code": e.status_code, "details": e.details},
            )
            raise HTTPException(status_code=e.status_code, detail=e.to_dict())

        elif isinstance(e, IntegrityError):
            logger.error(f"Database integrity error in {func_name}: {str(e.orig)}")

            error_info = str(e.orig).lower() if e.orig else str(e).lower()
            if "unique" in error_info or "duplicate" in error_info:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail={
                        "message": "Resource already exists with the provided unique values",
                        "type": "unique_violation",
                    },
                )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "message": "Database constraint violation",
                    "type": "integrity_error",
                },
            )

        elif isinstance(e, OperationalError):
            logger.error(f"Database operational error in {func_name}: {str(e.orig)}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "message": "Database service temporarily unavailable",
                    "type": "operational_error",
                },
            )

        elif isinstance(e, SQLAlchemyError):
            logger.error(f"Database error in {func_name}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"message": "Database error occurred", "type": "database_error"},
            )

        elif isinstance(e, ValidationError):
            logger.warning(f"Pydantic validation error in {func_name}: {e.errors()}")
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "message": "Request validation failed",
                    "errors": e.errors(include_url=False, include_context=False),
                },
            )

        elif isinstance(e, HTTPException):
            raise e

        else:
            logger.error(
                f"Unexpected error in {func_name}: {str(e)}\n{traceback.format_exc()}"
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"message": "An unexpected error occurred"},
            )

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                handle_exception(e, func.__name__)

        return async_wrapper
    else:

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                handle_exception(e, func.__name__)

        return sync_wrapper
