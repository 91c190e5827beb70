"""
Exceptions Package for Honeypot Sensor

Provides the exception hierarchy for error handling
throughout the application.
"""

from exceptions.base import (
    HoneypotException,
    ConfigurationError,
    InitializationError
)

from exceptions.sensor import (
    ListenerBindError,
    NoListenersError,
    NotificationDeliveryError
)

__all__ = [
    # Base exceptions
    "HoneypotException",
    "ConfigurationError",
    "InitializationError",

    # Sensor exceptions
    "ListenerBindError",
    "NoListenersError",
    "NotificationDeliveryError"
]
