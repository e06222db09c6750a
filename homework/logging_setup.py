"""Logging configuration for the command-line front end."""

import logging
import sys


def setup_logging(level: int = logging.WARNING) -> None:
    """Send log records at `level` and above to stderr.

    Replaces any handlers installed by an earlier call.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    logging.captureWarnings(True)
