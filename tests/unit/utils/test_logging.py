"""Unit tests for JSON logging in logging.py.

Test coverage includes:

1. JsonFormatter output
   - Ensures standard fields are rendered as one JSON document.
   - Ensures `extra` fields are attached and non-JSON values stringified.
   - Ensures exceptions are rendered in an "exception" field.

2. initialize_logging()
   - Ensures the root logger uses the JSON formatter and LOG_LEVEL.
"""

import sys
import json
import logging
from datetime import datetime, UTC

from freezegun import freeze_time

from mdow.utils.logging import JsonFormatter, initialize_logging


def make_record(msg='Forwarding insert.', exc_info=None, **extra):
    record = logging.LogRecord('mdow.store.forwarder', logging.INFO, __file__, 1, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter output
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_format_standard_fields():
    """Ensure timestamp, level, logger and message are rendered."""
    log = json.loads(JsonFormatter().format(make_record()))

    assert log == {
        'timestamp': '2025-10-15T12:00:00.000Z',
        'level': 'INFO',
        'logger': 'mdow.store.forwarder',
        'message': 'Forwarding insert.',
    }


def test_format_extra_fields():
    """Ensure extras are attached and datetimes stringified."""
    moment = datetime(2025, 10, 15, tzinfo=UTC)
    log = json.loads(JsonFormatter().format(make_record(event='FORWARDED_WRITE', cutoff=moment)))

    assert log['event'] == 'FORWARDED_WRITE'
    assert log['cutoff'] == str(moment)


def test_format_exception():
    """Ensure exc_info is rendered as a traceback string."""
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'RuntimeError: boom' in log['exception']
    assert 'exc_info' not in log


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging(monkeypatch):
    """Ensure the root logger is configured from LOG_LEVEL with a JSON handler."""
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, root.handlers[:]

    try:
        initialize_logging()
        assert root.level == logging.DEBUG
        assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
