"""Design manager logger.

Thin loguru wrapper with an automatic ``[design]`` prefix. Engine modules log
through the ``_log_*`` helpers here instead of importing loguru directly, so
every recoverable problem (dropped sections, bad profile JSON, failed saves)
ends up in one place with the same prefix.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[design]"

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
_CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(log_dir: Path, console_level: str = "INFO") -> Path:
    """Configure loguru with a DEBUG file sink and a console sink.

    Args:
        log_dir: Directory that receives ``design-manager.log``.
        console_level: Minimum level echoed to stdout.

    Returns:
        Path to the log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "design-manager.log"

    logger.remove()
    logger.add(log_file, format=_FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=_CONSOLE_FORMAT, level=console_level, colorize=True)

    _log_debug(f"Log file: {log_file}")
    return log_file


# Wrapper functions with automatic [design] prefix


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")
