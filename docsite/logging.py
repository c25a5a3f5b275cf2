"""Logging setup shared by the docsite CLI and build service."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "docsite"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ComponentFormatter(logging.Formatter):
    """Prefixes console lines with the build component, e.g. ``[docsite:pipeline]``."""

    def __init__(self) -> None:
        super().__init__("[%(component)s] %(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        _, _, component = record.name.partition(".")
        record.component = f"{ROOT_LOGGER}:{component}" if component else ROOT_LOGGER
        return super().format(record)


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the logger for a build component (``pipeline``, ``client.loader``...)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER)


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console output on stderr and, optionally, a debug-level file sink.

    Handlers are replaced on every call so repeated CLI invocations in one
    process do not duplicate lines.
    """
    level = console_level(verbose=verbose, quiet=quiet)
    logger = get_logger()
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(ComponentFormatter())
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    logger.setLevel(logging.DEBUG if log_file is not None else level)
    return logger


__all__ = ["ComponentFormatter", "configure_logging", "console_level", "get_logger"]
