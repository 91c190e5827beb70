"""
============================================================================
HONEYPOT SENSOR - MAIN APPLICATION
============================================================================
Passive network sensor.  Listens on a fixed set of well-known service
ports, reports every inbound connection to a webhook, and closes it
without speaking the protocol.  An hourly heartbeat tells the operator
the sensor itself is still alive.

Startup Order
-------------
1.  SIGINT / SIGTERM raise KeyboardInterrupt (exit 0) until the loop runs
2.  Configure logging, load settings (WEBHOOK_URL required → exit 1)
3.  Install loop SIGINT / SIGTERM handlers
4.  Bind every monitored port (exit 1 when none bound)
5.  Arm the heartbeat, send "honeypot started"
6.  Idle until a termination signal arrives

Shutdown
--------
On SIGINT or SIGTERM: cancel heartbeat → close sockets → exit 0.
Pending webhook deliveries are not drained.

Exit Codes
----------
0   clean shutdown via signal
1   missing/invalid configuration, or no listener could be bound
============================================================================
"""

import asyncio
import signal
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Path setup — ensure the project root is importable regardless of CWD
# ---------------------------------------------------------------------------
sys.path.insert(0, str(Path(__file__).parent))

# ---------------------------------------------------------------------------
# Project imports
# ---------------------------------------------------------------------------
from config.settings import Settings, load_settings
from exceptions import ConfigurationError, NoListenersError
from sensor.manager import ListenerManager
from utils.logger import get_logger, setup_logging


EXIT_OK = 0
EXIT_FAILURE = 1

logger = get_logger("Main")


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _interrupt_on_signals() -> dict:
    """
    Make SIGTERM (and SIGINT) raise KeyboardInterrupt until the event loop
    installs its own handlers.

    Returns the previous handlers so they can be restored.
    """
    previous = {}
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            previous[sig] = signal.signal(sig, signal.default_int_handler)
        except ValueError:
            # signal.signal() only works from the main thread
            pass
    return previous


def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event
) -> bool:
    """
    Install SIGTERM / SIGINT handlers that release ``stop_event``.

    Returns False where the loop cannot install them (Windows); the caller
    then relies on KeyboardInterrupt instead.
    """
    def _handle_signal(sig: signal.Signals) -> None:
        logger.info(f"⚡ {sig.name} received")
        stop_event.set()

    installed = False
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal, sig)
            installed = True
        except (NotImplementedError, OSError, RuntimeError):
            pass
    return installed


# ============================================================================
# RUN
# ============================================================================

def _log_banner(settings: Settings) -> None:
    logger.info(f"Starting honeypot on ports: {', '.join(str(p) for p in settings.ports)}")
    logger.info(f"Webhook URL: {settings.webhook}")
    logger.info(f"Host Name: {settings.host_name}")
    logger.bind(settings=settings.to_dict()).debug("Effective settings loaded")


async def run_sensor(settings: Settings) -> int:
    """
    Run the sensor until a termination signal arrives.

    Returns the process exit code.
    """
    stop_event = asyncio.Event()
    _install_signal_handlers(asyncio.get_running_loop(), stop_event)

    manager = ListenerManager(settings)
    try:
        await manager.run(stop_event)
    except NoListenersError as e:
        logger.bind(error=e.to_dict()).debug(e.log_format())
        return EXIT_FAILURE

    return EXIT_OK


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main() -> int:
    previous_handlers = _interrupt_on_signals()
    try:
        # Bootstrap logging so configuration errors are visible
        setup_logging()

        try:
            settings = load_settings()
        except ConfigurationError as e:
            logger.bind(error=e.to_dict()).error(e.message)
            return EXIT_FAILURE

        setup_logging(
            level=settings.log_level.value,
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )
        _log_banner(settings)

        return asyncio.run(run_sensor(settings))
    except KeyboardInterrupt:
        # Signal during startup, or a platform without loop signal handlers
        logger.info("Shutting down honeypot...")
        return EXIT_OK
    finally:
        for sig, handler in previous_handlers.items():
            if handler is not None:
                signal.signal(sig, handler)


# ============================================================================
# SCRIPT ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    sys.exit(main())
