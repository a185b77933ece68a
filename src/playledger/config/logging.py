"""Shared logging helpers for playledger."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "PLAYLEDGER_LOG_LEVEL"


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level (or ``PLAYLEDGER_LOG_LEVEL`` when set) and a terse format suitable for
    CLI output. Pass ``force=True`` to reconfigure during tests or specialised entry points.
    """

    if level is None:
        level = logging.getLevelNamesMapping().get(
            os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper(),
            logging.INFO,
        )

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
