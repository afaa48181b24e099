"""Logging setup for the changestage command line."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI runs.

    Library modules only create loggers; this is called from ``main``. ``force=True``
    replaces handlers installed earlier, e.g. by a test run.
    """

    logging.basicConfig(level=level, format=_FORMAT, datefmt="%H:%M:%S", force=force)
    # per-statement SQL logging is opt-in via -v
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level <= logging.DEBUG else logging.WARNING
    )
