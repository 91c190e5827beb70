"""
============================================================================
HONEYPOT SENSOR - SENSOR PACKAGE
============================================================================
Runtime components of the sensor:
    • ConnectionAttempt / NotificationPayload — immutable event records
    • WebhookNotifier     — fire-and-forget JSON delivery
    • PortListener        — one bound socket per monitored port
    • HeartbeatScheduler  — hourly "still alive" health checks
    • ListenerManager     — binding and lifecycle

File layout
-----------
sensor/
├── __init__.py          ← this file
├── models.py            ← event records
├── notifier.py          ← WebhookNotifier
├── listener.py          ← PortListener + start_listener()
├── heartbeat.py         ← HeartbeatScheduler
└── manager.py           ← ListenerManager + LifecycleState
============================================================================
"""

from sensor.models import ConnectionAttempt, NotificationPayload
from sensor.notifier import WebhookNotifier
from sensor.listener import PortListener, start_listener
from sensor.heartbeat import HeartbeatScheduler, next_boundary
from sensor.manager import LifecycleState, ListenerManager

__all__ = [
    # Events
    "ConnectionAttempt",
    "NotificationPayload",

    # Delivery
    "WebhookNotifier",

    # Listening
    "PortListener",
    "start_listener",

    # Heartbeat
    "HeartbeatScheduler",
    "next_boundary",

    # Lifecycle
    "LifecycleState",
    "ListenerManager",
]
