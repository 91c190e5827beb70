"""
============================================================================
HONEYPOT SENSOR - LOGGING UTILITY
============================================================================
Console and optional rotating-file logging built on loguru.

Every component obtains its logger through ``get_logger("Component")``
which binds the component name into each record.
============================================================================
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from config.constants import Defaults


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {message}"

# Records logged through the bare logger still need a component
logger.configure(extra={"component": "honeypot"})


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(
    level: str = Defaults.LOG_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    json_logs: bool = False,
    colorize: Optional[bool] = None,
    rotation: str = Defaults.LOG_FILE_MAX_SIZE,
    retention: int = Defaults.LOG_FILE_RETENTION,
) -> None:
    """
    Configure logging sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional path of a rotating log file
        json_logs: Serialize file records as JSON
        colorize: Force console colours on/off (auto-detect when None)
        rotation: loguru rotation policy for the file sink
        retention: Number of rotated files to keep
    """
    # Remove default loguru handler (and any earlier configuration)
    logger.remove()
    logger.configure(extra={"component": "honeypot"})

    level = level.upper()

    # Console Handler
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )

    # File Handler
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=json_logs,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f"Logging system initialized (level={level}, file={log_file or 'none'})")


def get_logger(name: Optional[str] = None):
    """
    Get logger instance with optional component name.

    Args:
        name: Component name shown in every line

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(component=name)
    return logger
