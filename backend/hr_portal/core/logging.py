"""Logging setup shared by the API process and the Celery worker."""
import logging
import sys

from pythonjsonlogger import jsonlogger

from hr_portal.core.config import settings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Third-party loggers that drown out the access-control audit lines at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "celery.beat", "urllib3")


def setup_logging() -> None:
    """JSON lines in production (one object per record, tagged with the service name); plain text elsewhere."""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.APP_ENV == "production":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                LOG_FORMAT,
                rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
                static_fields={"service": "hr-portal", "env": settings.APP_ENV},
            )
        )
        logging.root.handlers = [handler]
        logging.root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
