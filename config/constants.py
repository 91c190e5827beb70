"""
Constants Module for Honeypot Sensor

Contains the monitored port set, notification enumerations and the
static defaults used throughout the application.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Final, Tuple


# Well-known service ports, in listening order
PORT_SERVICES: Final[Dict[int, str]] = {
    21: "FTP",
    22: "SSH",
    23: "Telnet",
    25: "SMTP",
    53: "DNS",
    80: "HTTP",
    110: "POP3",
    143: "IMAP",
    443: "HTTPS",
    993: "IMAPS",
    995: "POP3S",
    1433: "SQL Server",
    1521: "Oracle",
    3306: "MySQL",
    3389: "RDP",
    5432: "PostgreSQL",
    5900: "VNC",
    6379: "Redis",
    8080: "HTTP Alt",
    8443: "HTTPS Alt",
}

MONITORED_PORTS: Final[Tuple[int, ...]] = tuple(PORT_SERVICES)

PROTOCOL_TCP: Final[str] = "TCP"


class NotificationType(str, Enum):
    """
    Notification Type Enumeration

    The closed set of envelope types sent to the webhook.
    """

    CONNECTION_ATTEMPT = "connection_attempt"
    HEALTH_CHECK = "health_check"


class HealthMessage(str, Enum):
    """Status strings carried by health_check payloads."""

    STARTED = "honeypot started"
    ALIVE = "still alive"


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Defaults:
    """Default values used by settings and components."""

    BIND_HOST: Final[str] = "0.0.0.0"
    HEARTBEAT_INTERVAL: Final[int] = 60 * 60  # 1 hour
    WEBHOOK_TIMEOUT: Final[float] = 10.0
    LOG_LEVEL: Final[str] = LogLevel.INFO.value
    LOG_FILE_MAX_SIZE: Final[str] = "10 MB"
    LOG_FILE_RETENTION: Final[int] = 5


def service_name(port: int) -> str:
    """Return the nominal service for a port, or 'unknown'."""
    return PORT_SERVICES.get(port, "unknown")
