"""Logging for hdrgen.

Every module logs through ``get_logger("<component>")`` so records land under
the ``hdrgen`` hierarchy. Console lines carry the component, e.g.
``[hdrgen:registry] DEBUG Registered typedef size_t (0 dependencies)``.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "hdrgen"

CONSOLE_FORMAT = "[%(component)s] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Return ``hdrgen.<component>``, or the package logger itself."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER)


class ComponentFormatter(logging.Formatter):
    """Shortens ``hdrgen.registry`` to ``hdrgen:registry`` for console output."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{ROOT_LOGGER}."
        if record.name.startswith(prefix):
            record.component = f"{ROOT_LOGGER}:{record.name[len(prefix):]}"
        else:
            record.component = record.name
        return super().format(record)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console (and optional file) handlers to the ``hdrgen`` logger.

    ``verbose`` wins over ``quiet``. Calling this again replaces the handlers
    installed by the previous call.
    """
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(ComponentFormatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["ComponentFormatter", "configure_logging", "get_logger", "resolve_level"]
