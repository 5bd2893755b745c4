"""Logging configuration for clusternet.

Structured logging via loguru. Every clusternet module binds a
``component`` and the provider binds the ``cluster`` it is working on;
both are rendered as a ``component[cluster]`` prefix. Library logging is
disabled until a caller opts in with ``setup_logging``.

Example:
    from clusternet.observability.logging import LogConfig, setup_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG"))
    ...
    teardown_logging(handler_ids)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from loguru import logger


type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "TRACE"]


def _format_context(record: Any) -> str:
    extra = record.get("extra", {})
    component = extra.get("component")
    if component is None:
        return ""
    cluster = extra.get("cluster")
    return f"{component}[{cluster}] " if cluster else f"{component} "


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> "
    "<level>{level: <7}</level> "
    "<cyan>{extra[_ctx]}</cyan>"
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} {extra[_ctx]}{message}"


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration.

    Attributes:
        level: Minimum level for the console.
        file: Path to a log file. Empty disables file output.
        file_level: Minimum level for the file.
        console: Whether to log to stderr.
        rotation: File rotation policy (e.g., "50 MB", "1 day").
    """

    level: LogLevel = "INFO"
    file: str = ""
    file_level: LogLevel = "DEBUG"
    console: bool = True
    rotation: str = "50 MB"


def setup_logging(config: LogConfig) -> list[int]:
    """Enable clusternet logging and return handler IDs for cleanup."""
    logger.remove()
    logger.enable("clusternet")
    logger.configure(patcher=lambda r: r["extra"].update(_ctx=_format_context(r)))
    handler_ids: list[int] = []

    if config.console:
        handler_ids.append(logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            filter="clusternet",
        ))

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(logger.add(
            config.file,
            level=config.file_level,
            format=FILE_FORMAT,
            rotation=config.rotation,
            filter="clusternet",
        ))

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging again."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("clusternet")
