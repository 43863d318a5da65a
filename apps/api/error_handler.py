"""
Error handling utilities for RecipeScan API.
Provides standardized error logging and response formatting.
"""
import logging
from typing import Any, Dict, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class APIError:
    """Standardized API error handler."""

    @staticmethod
    def handle_validation_error(
        operation: str,
        error: Exception,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> HTTPException:
        """
        Handle validation errors with detailed logging.

        Args:
            operation: Description of the operation
            error: The validation error
            extra_context: Additional context to log

        Returns:
            HTTPException with validation error details
        """
        context = {"operation": operation, **(extra_context or {})}

        logger.warning(
            f"Validation error during {operation}: {str(error)}",
            extra=context,
        )

        return HTTPException(
            status_code=400,
            detail=f"Validation error: {str(error)}",
        )

    @staticmethod
    def handle_no_text_error(
        source: str,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> HTTPException:
        """
        Handle a source from which no text could be recognized.

        The caller should retry the scan or enter the recipe manually.
        """
        logger.warning(
            f"No text recognized in {source}",
            extra={"source": source, **(extra_context or {})},
        )

        return HTTPException(
            status_code=422,
            detail="No text could be recognized. Retry the scan or edit the recipe manually.",
        )

    @staticmethod
    def handle_unavailable_error(
        provider: str,
        error: Exception,
    ) -> HTTPException:
        """Handle a provider (OCR engine) that is not installed or failed to load."""
        logger.error(
            f"{provider} unavailable: {str(error)}",
            extra={"provider": provider},
        )

        return HTTPException(
            status_code=503,
            detail=f"{provider} is not available",
        )

    @staticmethod
    def handle_generic_error(
        operation: str,
        error: Exception,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> HTTPException:
        """
        Handle generic/unexpected errors with detailed logging.

        Args:
            operation: Description of the operation
            error: The exception that occurred
            extra_context: Additional context to log

        Returns:
            HTTPException with generic error message
        """
        context = {"operation": operation, **(extra_context or {})}

        logger.exception(
            f"Unexpected error during {operation}: {str(error)}",
            extra=context,
        )

        return HTTPException(
            status_code=500,
            detail="An unexpected error occurred",
        )

    @staticmethod
    def log_operation_start(
        operation: str,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the start of an operation."""
        context = {"operation": operation, **(extra_context or {})}
        logger.debug(f"Starting operation: {operation}", extra=context)

    @staticmethod
    def log_operation_success(
        operation: str,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log successful operation completion."""
        context = {"operation": operation, **(extra_context or {})}
        logger.info(f"Operation successful: {operation}", extra=context)
