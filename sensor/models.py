"""
============================================================================
HONEYPOT SENSOR - EVENT MODELS
============================================================================
Immutable records that flow from the listeners and the heartbeat into the
notifier.  Both are built per event, serialized once, and discarded.
============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from config.constants import PROTOCOL_TCP, HealthMessage, NotificationType
from utils.helpers import utc_now_iso


@dataclass(frozen=True)
class ConnectionAttempt:
    """
    One observed inbound connection.

    Attributes
    ----------
    timestamp : str     — ISO-8601 UTC, taken at accept time
    source_ip : str     — peer address as reported by the socket layer
    target_port : int   — the listening port that accepted the connection
    protocol : str      — always "TCP"
    """
    timestamp: str
    source_ip: str
    target_port: int
    protocol: str = PROTOCOL_TCP

    @classmethod
    def observe(cls, source_ip: str, target_port: int) -> "ConnectionAttempt":
        """Record an attempt happening now."""
        return cls(
            timestamp=utc_now_iso(),
            source_ip=source_ip,
            target_port=target_port,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "sourceIP": self.source_ip,
            "targetPort": self.target_port,
            "protocol": self.protocol,
        }


@dataclass(frozen=True)
class NotificationPayload:
    """
    Wire-level envelope POSTed to the webhook.

    ``data`` carries a ConnectionAttempt for connection_attempt payloads
    and a short status string for health_check payloads.
    """
    type: NotificationType
    timestamp: str
    host_name: str
    data: Union[ConnectionAttempt, str]

    def __post_init__(self) -> None:
        if self.type == NotificationType.CONNECTION_ATTEMPT:
            if not isinstance(self.data, ConnectionAttempt):
                raise TypeError("connection_attempt payloads carry a ConnectionAttempt")
        elif not isinstance(self.data, str):
            raise TypeError("health_check payloads carry a status string")

    @classmethod
    def connection_attempt(
        cls, attempt: ConnectionAttempt, host_name: str
    ) -> "NotificationPayload":
        return cls(
            type=NotificationType.CONNECTION_ATTEMPT,
            timestamp=attempt.timestamp,
            host_name=host_name,
            data=attempt,
        )

    @classmethod
    def health_check(
        cls,
        message: Union[HealthMessage, str],
        host_name: str,
        timestamp: Optional[str] = None,
    ) -> "NotificationPayload":
        if isinstance(message, HealthMessage):
            message = message.value
        return cls(
            type=NotificationType.HEALTH_CHECK,
            timestamp=timestamp or utc_now_iso(),
            host_name=host_name,
            data=message,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation of the envelope."""
        data = (
            self.data.to_dict()
            if isinstance(self.data, ConnectionAttempt)
            else self.data
        )
        return {
            "type": self.type.value,
            "timestamp": self.timestamp,
            "host_name": self.host_name,
            "data": data,
        }
