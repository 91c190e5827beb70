"""
Configuration Package for Honeypot Sensor

This package contains all configuration-related modules including:
- Settings management with environment variable support
- The monitored port set, enums and defaults
"""

from config.settings import (
    Settings,
    load_settings
)

from config.constants import (
    MONITORED_PORTS,
    PORT_SERVICES,
    PROTOCOL_TCP,
    NotificationType,
    HealthMessage,
    LogLevel,
    Defaults,
    service_name
)

__all__ = [
    # Settings
    "Settings",
    "load_settings",

    # Constants
    "MONITORED_PORTS",
    "PORT_SERVICES",
    "PROTOCOL_TCP",
    "NotificationType",
    "HealthMessage",
    "LogLevel",
    "Defaults",
    "service_name"
]
