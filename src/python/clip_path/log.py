# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Forward package log records to the host application's console."""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "clip_path"


class HostLogHandler(logging.Handler):
    """Logging handler writing to a host log object with ``error``/``warn``/``info``."""

    def __init__(self, host_log, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.host_log = host_log

    def emit(self, record):
        try:
            msg = self.format(record)
            if record.levelno >= logging.ERROR:
                self.host_log.error(msg)
            elif record.levelno >= logging.WARNING:
                self.host_log.warn(msg)
            else:
                self.host_log.info(msg)
        except Exception:
            self.handleError(record)


def attach_host_log(host_log, level: int = logging.INFO) -> HostLogHandler:
    """Route ``clip_path`` records to *host_log*.

    Attaching the same host log twice returns the existing handler.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    existing = _find_handler(logger, host_log)
    if existing is not None:
        return existing
    handler = HostLogHandler(host_log)
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return handler


def detach_host_log(handler: HostLogHandler) -> None:
    logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)


def _find_handler(logger: logging.Logger, host_log) -> Optional[HostLogHandler]:
    for handler in logger.handlers:
        if isinstance(handler, HostLogHandler) and handler.host_log is host_log:
            return handler
    return None
