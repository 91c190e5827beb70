"""
Base Exception Classes for Honeypot Sensor

Provides the foundation exception hierarchy from which all
other exceptions inherit.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from datetime import datetime, timezone


class HoneypotException(Exception):
    """
    Base Exception Class

    All custom exceptions in the sensor inherit from this class.
    Provides common functionality for error handling, logging,
    and serialization.

    Attributes:
        message: Human-readable error message
        error_code: Numeric error code for categorization
        details: Additional error details as dictionary
        timestamp: When the exception occurred
        recoverable: Whether the process can keep running
    """

    # Default error code
    default_error_code: int = 1000

    # Default recoverability
    default_recoverable: bool = True

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Numeric error code
            details: Additional error details
            cause: The underlying exception that caused this one
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable
        self.timestamp = datetime.now(timezone.utc)

    @property
    def full_message(self) -> str:
        """Get full error message with code."""
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }

    def log_format(self) -> str:
        """
        Format exception for logging.

        Returns:
            Formatted string for logging
        """
        parts = [
            f"Exception: {self.__class__.__name__}",
            f"Code: {self.error_code}",
            f"Message: {self.message}"
        ]

        if self.details:
            parts.append(f"Details: {self.details}")

        if self.cause:
            parts.append(f"Cause: {self.cause}")

        return " | ".join(parts)

    def __str__(self) -> str:
        return self.full_message


class ConfigurationError(HoneypotException):
    """
    Configuration Error

    Raised when required environment configuration is missing or
    invalid. Always fatal: the process exits before any listener starts.
    """

    default_error_code = 1100
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_key: The configuration key that caused the error
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class InitializationError(HoneypotException):
    """
    Initialization Error

    Raised when the sensor fails to reach the running state.
    """

    default_error_code = 1200
    default_recoverable = False

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if component:
            self.details["component"] = component
