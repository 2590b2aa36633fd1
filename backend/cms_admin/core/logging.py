"""Structured JSON logging configuration."""
import logging
import sys

from pythonjsonlogger import jsonlogger

from cms_admin.core.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def setup_logging(settings: Settings = default_settings) -> None:
    """Configure the root logger from LOG_LEVEL and LOG_FORMAT.

    LOG_FORMAT "json" writes one JSON object per line to stdout, "text" uses
    plain lines. Left empty, production gets JSON and every other APP_ENV text.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.log_format == "json":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                LOG_FORMAT,
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )
        logging.root.handlers = [handler]
    else:
        logging.basicConfig(format=LOG_FORMAT)
    logging.root.setLevel(level)
