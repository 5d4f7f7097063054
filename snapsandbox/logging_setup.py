"""
Logging configuration for snapsandbox entry points.

Library modules only create loggers; handlers are installed here by
command-line tools.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(debug: bool = False, stream=None) -> logging.Logger:
    """
    Install a stream handler on the snapsandbox logger.

    Args:
        debug: Log at DEBUG instead of WARNING
        stream: Stream for the handler, stderr when omitted

    Returns:
        logging.Logger: The snapsandbox package logger
    """
    logger = logging.getLogger('snapsandbox')
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    for handler in list(logger.handlers):
        if getattr(handler, '_snapsandbox', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._snapsandbox = True
    logger.addHandler(handler)
    return logger
