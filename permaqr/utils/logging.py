"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Deployed Lambdas log one JSON object per line:
{
    "timestamp": "2026-10-19T12:00:00.000Z",
    "level": "INFO",
    "logger": "permaqr.lambdas.preview.app",
    "message": "Serving preview page. Responding with 200.",
    "service": "permaqr",
    "env": "prod",
    "event": "PREVIEW_SUCCESS"
}

Under SAM local the same records are printed as plain text lines, which are
easier to read in a terminal.

Destination URLs are never logged by the handlers; QR codes stay untracked.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from permaqr.constants import ENV
from permaqr.utils.runtime import running_locally


# Attributes every LogRecord carries; anything else arrived through `extra`
RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}

# Third-party loggers that flood DEBUG output
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3', 'PIL')


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras

    Args:
        static_fields (dict, optional):
            Fields attached to every record, e.g. {'service': 'permaqr'}.
            Unset values are dropped.
    """

    def __init__(self, static_fields: dict | None = None) -> None:
        super().__init__()
        self.static_fields = {key: value for key, value in (static_fields or {}).items() if value}

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.static_fields,
        }

        # Attach `extra` fields
        log.update({key: value for key, value in record.__dict__.items() if key not in RESERVED_ATTRS})

        if record.exc_info:
            log['exc_info'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack_info'] = self.formatStack(record.stack_info)

        # Extras may hold enums, sets or exceptions
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    formatters = {
        'json': {
            '()': JsonFormatter,
            'static_fields': {
                'service': os.getenv(ENV.App.APP_NAME),
                'env': os.getenv(ENV.App.APP_ENV),
            },
        },
        'plain': {
            'format': '%(asctime)s %(levelname)-8s %(name)s: %(message)s',
        },
    }

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': formatters,
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'plain' if running_locally() else 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
