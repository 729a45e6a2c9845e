"""Utility exception classes for blogskin.

This module provides exception classes for file handling in the command-line
surface and the formatter that turns any error into a terminal message.
"""

from typing import Optional, Any

from ..exceptions import BlogSkinError, APIError, RateLimitError


class FileOperationError(BlogSkinError):
    """Exception raised for file operation errors."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            file_path: Path to the file that caused the error
            operation: Operation that failed (read, write, parse)
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)
        self.file_path = file_path
        self.operation = operation


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        debug: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, FileOperationError):
        message = f"File error: {error.message}"
        if error.file_path:
            message += f"\nFile: {error.file_path}"
        if error.operation:
            message += f"\nOperation: {error.operation}"
        return message

    if isinstance(error, RateLimitError):
        message = f"Rate limit exceeded: {error.message}"
        if error.retry_after:
            message += f"\nRetry after: {error.retry_after}s"
        return message

    if isinstance(error, APIError):
        message = f"API error: {error.message}"
        if debug and error.status_code:
            message += f"\nStatus code: {error.status_code}"
        if debug and error.response_data:
            message += f"\nResponse: {error.response_data}"
        return message

    if isinstance(error, BlogSkinError):
        message = f"Error: {error.message}"
        if debug and error.details:
            message += f"\nDetails: {error.details}"
        return message

    return f"Unexpected error: {error}"
