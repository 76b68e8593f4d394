"""Error types raised by the store layer and the form layer."""

from typing import Optional


class StoreError(Exception):
    """
    A backing store call failed (transport, query or constraint failure).

    Attributes:
        operation: Name of the store operation that failed
        message: Human readable description
    """

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message
        self.cause = cause


class ValidationError(ValueError):
    """Form input rejected before it reaches the store."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message
