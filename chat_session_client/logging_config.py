"""
Structured logging support.

Provides a JSON formatter so that the CLI can emit one JSON object per log
line when running under a log collector. Values passed through ``extra``
are grouped under ``context``; secret-looking fields are masked there.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict

from .models import Credentials


# LogRecord attributes that are not user-supplied ``extra`` fields
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message', 'asctime'
))

SECRET_FIELDS = frozenset(('token', 'access_token', 'password', 'secret'))

REDACTED = '***'


def _context_value(key: str, value: Any) -> Any:
    if key.lower() in SECRET_FIELDS:
        return REDACTED
    if isinstance(value, Credentials):
        return value.to_dict()
    return value


class StructuredFormatter(logging.Formatter):
    """Formats records as single-line JSON documents."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            error_type, error, tb = record.exc_info
            entry['exception'] = {
                'type': error_type.__name__,
                'message': str(error),
                'traceback': traceback.format_exception(error_type, error, tb)
            }
            details = getattr(error, 'details', None)
            if details:
                entry['exception']['details'] = details

        if self.include_extra:
            context = {
                key: _context_value(key, value)
                for key, value in record.__dict__.items()
                if key not in _RESERVED_ATTRS and not key.startswith('_')
            }
            if context:
                entry['context'] = context

        return json.dumps(entry, default=str)
