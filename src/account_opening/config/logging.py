"""Logging setup for command line entry points."""

from __future__ import annotations

import logging
from typing import Final

# Third-party loggers that are chatty at INFO during migrations and gateway calls.
QUIET_LOGGERS: Final[tuple[str, ...]] = ("alembic.runtime.migration", "httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once.

    ``level`` applies to the application's own loggers; the loggers listed in
    ``QUIET_LOGGERS`` stay at WARNING unless ``level`` is DEBUG. Pass
    ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    quiet_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
