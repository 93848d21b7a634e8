"""Logging configuration"""

import logging
import sys

from pythonjsonlogger import jsonlogger

from config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that adds level, logger and app name"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["app_name"] = settings.APP_NAME


def setup_logging(level: str = None, log_format: str = None) -> logging.Handler:
    """Configure root logging to stdout; returns the installed handler"""
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    handler = logging.StreamHandler(sys.stdout)

    if log_format == "json":
        formatter = CustomJsonFormatter(
            fmt="%(asctime)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Replace the handler from an earlier call instead of stacking them
    for existing in list(root_logger.handlers):
        if getattr(existing, "_utility_splitter", False):
            root_logger.removeHandler(existing)
    handler._utility_splitter = True
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return handler
