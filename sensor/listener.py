"""
============================================================================
HONEYPOT SENSOR - PORT LISTENER
============================================================================
One PortListener owns one bound TCP socket.  Every accepted connection is
turned into a ConnectionAttempt, handed to the notifier, logged, and
closed.  Nothing is ever read from or written to the peer.

Lifecycle
---------
    listener = await start_listener(port, notifier, host_name)
        → None if the bind failed (logged), the other ports carry on
    ...
    listener.close()   ← process shutdown only

The accept loop runs as its own asyncio task.  If it dies, the failure is
logged and only that port goes dark.
============================================================================
"""

import asyncio
from typing import Any, Optional

from config.constants import Defaults, service_name
from exceptions.sensor import ListenerBindError
from sensor.models import ConnectionAttempt, NotificationPayload
from utils.logger import get_logger


logger = get_logger("Listener")


class PortListener:
    """
    Ownership handle for one monitored port.

    Attributes
    ----------
    port : int                 — the monitored port (actual port if bound to 0)
    host : str                 — bind address
    connection_count : int     — connections accepted since start
    """

    def __init__(
        self,
        port: int,
        notifier: Any,
        host_name: str,
        bind_host: str = Defaults.BIND_HOST,
    ):
        self.port = port
        self.host = bind_host
        self.notifier = notifier
        self.host_name = host_name
        self.connection_count = 0

        self._server: Optional[asyncio.AbstractServer] = None
        self._accept_task: Optional[asyncio.Task] = None
        self._closed = False

    def __repr__(self) -> str:
        return f"PortListener({self.host}:{self.port}, active={self.is_active})"

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    async def start(self) -> "PortListener":
        """
        Bind the socket and launch the accept loop.

        Raises
        ------
        ListenerBindError
            If the OS refuses the bind (in use, permission denied, ...).
        """
        try:
            self._server = await asyncio.start_server(
                self._handle_connection,
                host=self.host,
                port=self.port,
            )
        except OSError as e:
            raise ListenerBindError(
                f"Failed to start listener on port {self.port}: {e.strerror or e}",
                port=self.port,
                host=self.host,
                cause=e,
            ) from e

        if self.port == 0:
            self.port = self._server.sockets[0].getsockname()[1]

        self._accept_task = asyncio.create_task(
            self._accept_loop(), name=f"listener-{self.port}"
        )
        logger.info(f"Listening on port {self.port} ({service_name(self.port)})")
        return self

    def close(self) -> None:
        """Close the socket and stop accepting.  Idempotent."""
        self._closed = True
        if self._server is not None:
            self._server.close()
        if self._accept_task is not None and not self._accept_task.done():
            self._accept_task.cancel()

    @property
    def is_active(self) -> bool:
        return (
            not self._closed
            and self._accept_task is not None
            and not self._accept_task.done()
        )

    # ------------------------------------------------------------------
    # ACCEPT LOOP
    # ------------------------------------------------------------------

    async def _accept_loop(self) -> None:
        """Serve until the socket is closed or accepting fails for good."""
        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            logger.debug(f"Accept loop on port {self.port} cancelled")
            raise
        except Exception as e:
            logger.error(f"Accept loop on port {self.port} terminated: {e}")
        finally:
            self._server.close()

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """
        Record the attempt, notify, close.  Runs once per accepted
        connection; nothing here is shared with other connections.
        """
        try:
            self.connection_count += 1
            peer = writer.get_extra_info("peername")
            source_ip = peer[0] if peer else "unknown"

            attempt = ConnectionAttempt.observe(source_ip, self.port)
            self.notifier.send(
                NotificationPayload.connection_attempt(attempt, self.host_name)
            )
            logger.info(
                f"Connection attempt detected: {attempt.source_ip}:{attempt.target_port}"
            )
        except Exception as e:
            logger.error(f"Error handling connection on port {self.port}: {e}")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass


async def start_listener(
    port: int,
    notifier: Any,
    host_name: str,
    bind_host: str = Defaults.BIND_HOST,
) -> Optional[PortListener]:
    """
    Start a listener on ``port``.

    Returns
    -------
    PortListener | None
        The active handle, or None if the bind failed.
    """
    listener = PortListener(port, notifier, host_name, bind_host=bind_host)
    try:
        return await listener.start()
    except ListenerBindError as e:
        logger.error(e.message)
        return None
