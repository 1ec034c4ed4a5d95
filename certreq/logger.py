"""Logging setup for the certreq CLI.

Library code logs through ``logging.getLogger("certreq")`` and never
configures handlers itself; the CLI calls :func:`setup_logging` once per
command so progress and failures of a CSR build land on stderr, or in
the file named by ``--log-file``. Key material is never logged.
"""

import logging
import os
import sys
import time


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class _MillisecondFormatter(logging.Formatter):
    """ISO 8601 local timestamps with a ``.mmm`` suffix."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = time.strftime(datefmt or DATE_FORMAT, self.converter(record.created))
        return "%s.%03d" % (stamp, record.msecs)


def setup_logging(log_file: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """Configure and return the ``certreq`` logger.

    Handlers from a previous call are closed and replaced, so repeated
    commands in one process do not duplicate output.

    Args:
        log_file: Append to this file (parent dirs are created). If *None*, use stderr.
        level: Logging level.
    """
    logger = logging.getLogger("certreq")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = _MillisecondFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
