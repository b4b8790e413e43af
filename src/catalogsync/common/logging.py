"""Logging bootstrap for the catalogsync CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# client libraries that log once per HTTP request
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Route batch progress and item failures to stderr.

    The orchestrator reports one INFO line per batch and one ERROR/WARNING line
    per failed or warned item. Per-request logs of the HTTP stack stay at
    WARNING or above. ``force=True`` replaces handlers installed earlier, e.g.
    by a test run.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
