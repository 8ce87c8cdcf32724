"""Stream handlers for integration loggers.

Records below the error threshold go to stdout, the rest to stderr, so a run
that silences stdout still shows its failures.
"""

import logging
import sys
from typing import IO, Optional


class _BelowLevelFilter(logging.Filter):
    def __init__(self, threshold: int) -> None:
        super().__init__()
        self._threshold = threshold

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._threshold


def _stream_handler(
    stream: IO[str],
    level: int,
    formatter: logging.Formatter,
    below: Optional[int] = None,
) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    if below is not None:
        handler.addFilter(_BelowLevelFilter(below))
    return handler


def attach_split_stream_handlers(
    logger: logging.Logger,
    formatter: logging.Formatter,
    *,
    level: int = logging.INFO,
    error_level: int = logging.WARNING,
) -> logging.Logger:
    """Replace the handlers of *logger* with an stdout/stderr pair.

    Handlers from an earlier call are removed first, so creating the same
    named logger twice does not duplicate output. The logger stops
    propagating to the root logger.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    error_level = max(error_level, level)
    logger.setLevel(level)
    logger.addHandler(_stream_handler(sys.stdout, level, formatter, below=error_level))
    logger.addHandler(_stream_handler(sys.stderr, error_level, formatter))
    logger.propagate = False
    return logger
