"""JSON logging for the redirect handler

IMPORTANT: Call `initialize_logging()` once at process start-up, before any
other logging is done.

Every record is written to stdout as a single JSON line:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "redirecthandler.dao.redis.redirect_redis_dao",
    "message": "Deleted redirect.",
    "sourceUriPath": "old/page",
    "host": "example.com"
}

Fields passed through `extra={...}` are merged into the object; values json
can't encode (datetimes, enums) fall back to str(). Tracebacks land in
"exception", stack dumps in "stack".

The AWS SDK loggers (boto3, botocore, urllib3) are capped at WARNING, since
every AppConfig poll would otherwise flood DEBUG output.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from redirecthandler.utils.constants import LOG_LEVEL_ENV


# Attributes every LogRecord carries; anything else came in through `extra`.
# Derived from a blank record so interpreter additions (e.g. taskName) are covered.
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None))) | {'message', 'asctime'}

QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


def iso_timestamp(created: float) -> str:
    """Render LogRecord.created as UTC ISO 8601 with milliseconds and a 'Z' suffix

    Example:
        >>> iso_timestamp(0.5)
        '1970-01-01T00:00:00.500Z'
    """
    moment = datetime.fromtimestamp(created, tz=UTC)
    return moment.isoformat(timespec='milliseconds').removesuffix('+00:00') + 'Z'


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': iso_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route all logs as JSON to stdout

    Args:
        level (str | None): root log level. Defaults to LOG_LEVEL, then INFO.
    """
    level = (level or os.getenv(LOG_LEVEL_ENV) or 'INFO').upper()
    # fmt: off
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'json': {'()': JsonFormatter}},
        'handlers': {'stdout': {'class': 'logging.StreamHandler', 'formatter': 'json', 'stream': 'ext://sys.stdout'}},
        'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
        'root': {'level': level, 'handlers': ['stdout']},
    })
    # fmt: on
