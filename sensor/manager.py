"""
============================================================================
HONEYPOT SENSOR - LISTENER MANAGER
============================================================================
Owns the set of active listeners and drives the sensor lifecycle:

    INITIALIZING ──▶ BINDING ──▶ RUNNING ──▶ TERMINATED
                        │
                        └── zero ports bound ──▶ NoListenersError

Binding
-------
Every configured port is tried in list order.  A port that fails to bind
is logged and skipped; the successful handles are frozen into a tuple that
is only cleared again on shutdown.

Running
-------
The heartbeat is armed and one "honeypot started" health_check is sent
straight away.  From then on all work happens in the listener accept
loops and the heartbeat timer; the manager just waits for the stop event.

Terminated
----------
Heartbeat cancelled, sockets closed.  In-flight webhook deliveries are not
awaited and may be lost.
============================================================================
"""

import asyncio
from enum import Enum
from typing import Any, Dict, Tuple

from config.constants import HealthMessage
from config.settings import Settings
from exceptions.sensor import NoListenersError
from sensor.heartbeat import HeartbeatScheduler
from sensor.listener import PortListener, start_listener
from sensor.notifier import WebhookNotifier
from utils.logger import get_logger


logger = get_logger("Manager")


class LifecycleState(str, Enum):
    INITIALIZING = "initializing"
    BINDING = "binding"
    RUNNING = "running"
    TERMINATED = "terminated"


class ListenerManager:
    """
    Top-level sensor orchestrator.

    Parameters
    ----------
    settings : Settings
        Validated configuration; reaching the constructor means the
        required values are present.
    notifier : WebhookNotifier | None
        Shared notifier.  Built from ``settings`` when omitted.
    """

    def __init__(self, settings: Settings, notifier: Any = None):
        self.settings = settings
        self.notifier = notifier if notifier is not None else WebhookNotifier(
            settings.webhook,
            timeout=settings.webhook_timeout,
        )
        self.heartbeat = HeartbeatScheduler(
            self.notifier,
            settings.host_name,
            interval=settings.heartbeat_interval,
        )

        self._state = LifecycleState.INITIALIZING
        self._listeners: Tuple[PortListener, ...] = ()

    # ------------------------------------------------------------------
    # STATE
    # ------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def listeners(self) -> Tuple[PortListener, ...]:
        return self._listeners

    @property
    def active_ports(self) -> Tuple[int, ...]:
        return tuple(lst.port for lst in self._listeners if lst.is_active)

    # ------------------------------------------------------------------
    # PHASES
    # ------------------------------------------------------------------

    async def bind(self) -> Tuple[PortListener, ...]:
        """
        Try every configured port in order.

        Raises
        ------
        NoListenersError
            If not a single port could be bound.
        """
        self._state = LifecycleState.BINDING
        ports = list(self.settings.ports)

        bound = []
        for port in ports:
            listener = await start_listener(
                port,
                self.notifier,
                self.settings.host_name,
                bind_host=self.settings.bind_host,
            )
            if listener is not None:
                bound.append(listener)

        self._listeners = tuple(bound)

        if not self._listeners:
            logger.error("No listeners could be started. Exiting.")
            raise NoListenersError(attempted_ports=ports)

        failed = len(ports) - len(self._listeners)
        if failed:
            logger.warning(f"{failed} of {len(ports)} port(s) could not be bound")
        return self._listeners

    async def start(self) -> None:
        """Bind, then enter RUNNING."""
        if self._state != LifecycleState.INITIALIZING:
            raise RuntimeError(f"cannot start from state {self._state.value}")

        await self.bind()

        self._state = LifecycleState.RUNNING
        logger.info(f"Successfully started {len(self._listeners)} listeners")

        self.heartbeat.start()
        self.heartbeat.beat(HealthMessage.STARTED)

        logger.info("Honeypot is running. Press Ctrl+C to stop.")

    async def run(self, stop_event: asyncio.Event) -> None:
        """Start, idle until ``stop_event`` is set, then shut down."""
        await self.start()
        try:
            await stop_event.wait()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Stop the heartbeat and close every socket.  Idempotent."""
        if self._state == LifecycleState.TERMINATED:
            return

        logger.info("Shutting down honeypot...")
        self._state = LifecycleState.TERMINATED

        await self.heartbeat.stop()

        for listener in self._listeners:
            listener.close()
        self._listeners = ()

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "host_name": self.settings.host_name,
            "configured_ports": list(self.settings.ports),
            "active_ports": list(self.active_ports),
            "connections": {lst.port: lst.connection_count for lst in self._listeners},
            "heartbeat": self.heartbeat.get_stats(),
            "notifier": (
                self.notifier.get_stats()
                if hasattr(self.notifier, "get_stats") else None
            ),
        }
