"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from helpdesk_sla.core.exceptions import (
    ApplicationException,
    DomainException,
    ValidationException,
    ConfigurationException,
    ConfigurationError,
    InvalidPriorityError,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "ConfigurationException",
    "ConfigurationError",
    "InvalidPriorityError",
]
