"""
Sensor Exception Classes for Honeypot Sensor

Errors raised by the listener, lifecycle and notification layers.
Only NoListenersError is fatal; the others are contained to the port
or event they concern.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from exceptions.base import HoneypotException, InitializationError


class ListenerBindError(HoneypotException):
    """
    Listener Bind Error

    Raised when a single port cannot be bound (already in use,
    permission denied, ...). The remaining ports are unaffected.
    """

    default_error_code = 2100
    default_recoverable = True

    def __init__(
        self,
        message: str,
        port: Optional[int] = None,
        host: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        self.port = port
        if port is not None:
            self.details["port"] = port
        if host:
            self.details["host"] = host


class NoListenersError(InitializationError):
    """
    No Listeners Error

    Raised when every configured port failed to bind. The sensor has no
    purpose without at least one listener.
    """

    default_error_code = 1201

    def __init__(
        self,
        message: str = "No listeners could be started",
        attempted_ports: Optional[Sequence[int]] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, component="ListenerManager", **kwargs)

        self.attempted_ports: List[int] = list(attempted_ports or [])
        if self.attempted_ports:
            self.details["attempted_ports"] = self.attempted_ports


class NotificationDeliveryError(HoneypotException):
    """
    Notification Delivery Error

    Raised inside a delivery task when the webhook answers with a
    non-success status. Never propagates past the notifier.
    """

    default_error_code = 3100
    default_recoverable = True

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        self.status_code = status_code
        if status_code is not None:
            self.details["status_code"] = status_code
        if url:
            self.details["url"] = url
