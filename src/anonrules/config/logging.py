"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging

# httpx logs every request at INFO, which drowns the CLI output.
_NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    ``verbose`` switches to DEBUG and lets the HTTP stack log its requests.
    Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
