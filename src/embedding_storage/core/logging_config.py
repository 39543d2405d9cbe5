"""
Embedding Storage Logging Configuration
=======================================
Centralized logging configuration using loguru.

Logs always go to stderr: with the stdio transport, stdout carries the MCP
JSON-RPC stream and must stay clean.

Usage:
    from embedding_storage.core.logging_config import configure_logging

    # At process startup:
    configure_logging(level="INFO")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from loguru import logger


def configure_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """
    Configure loguru logging for the server and the CLI.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, emit one JSON object per line. If None, check
            the LOG_FORMAT env var.

    Environment:
        LOG_FORMAT: Set to "json" to enable JSON formatted logs.
        LOG_LEVEL: Log level used when ``level`` is not given.
    """
    if json_format is None:
        json_format = os.environ.get("LOG_FORMAT", "").lower() == "json"

    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")

    logger.remove()

    if json_format:
        logger.add(sys.stderr, level=level.upper(), serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=level.upper(),
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
            backtrace=True,
            diagnose=False,
        )

    # The mcp SDK and requests/urllib3 log through the standard library.
    _intercept_standard_logging(level)
    logger.debug("Logging configured: level={}, json_format={}", level, json_format)


def _intercept_standard_logging(level: str) -> None:
    """Redirect standard library logging records into loguru."""

    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                log_level = logger.level(record.levelname).name
            except ValueError:
                log_level = record.levelno

            frame, depth = logging.currentframe(), 2
            while frame and frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.opt(depth=depth, exception=record.exc_info).log(
                log_level, record.getMessage()
            )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ["mcp", "urllib3", "uvicorn", "uvicorn.error", "uvicorn.access"]:
        logging.getLogger(logger_name).setLevel(level.upper())


__all__ = ["configure_logging"]
