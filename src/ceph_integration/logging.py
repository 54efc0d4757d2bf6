import logging
import sys

from pythonjsonlogger import jsonlogger

_LIBRARY_LOGGERS = ["ceph_integration", "minio", "urllib3"]


def setup_logging(level: int = logging.INFO):
    """
    Configures and sets up structured JSON logging for the library.

    This function initializes a JSON formatter that includes timestamp, level,
    logger name, message, trace_id, and span_id. It replaces default handlers
    for the root logger with a custom stream handler and lets the library and
    SDK loggers propagate to it, so storage calls and the HTTP layer beneath
    them share one log format.

    Args:
        level: Log level applied to the root logger.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in _LIBRARY_LOGGERS:
        lib_logger = logging.getLogger(logger_name)
        lib_logger.handlers = []
        lib_logger.propagate = True

    # urllib3 retry chatter is noise at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return root_logger
