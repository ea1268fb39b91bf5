"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Iterable, Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ConfigurationException(ApplicationException):
    """Exception for unreadable or invalid settings files."""


class ConfigurationError(DomainException):
    """
    Raised when the business calendar cannot reach a working window.

    Typical causes are an empty working-weekday set or holidays covering
    every date inside the search horizon. Never replaced by a guessed deadline.
    """


class InvalidPriorityError(DomainException):
    """Raised when a priority is not configured in the SLA settings."""

    def __init__(
        self,
        priority: str,
        valid_priorities: Iterable[str] = (),
        details: Optional[dict] = None
    ):
        self.priority = priority
        self.valid_priorities = sorted(valid_priorities)
        super().__init__(
            f"Priority '{priority}' is not configured",
            details or {"priority": priority, "valid_priorities": self.valid_priorities}
        )
