"""Unit tests for paste store settings in settings.py.

Test coverage includes:

1. PasteSettings defaults and validation
   - Ensures defaults match the documented values.
   - Ensures out-of-range values raise BadConfigurationError.

2. load_settings() environment parsing
   - Ensures environment variables override defaults.
   - Ensures malformed values raise BadConfigurationError.
   - Ensures a warning is logged when the id space is too small.
"""

import logging
import string
from datetime import timedelta

import pytest

from mdow.exceptions import BadConfigurationError
from mdow.utils.settings import PasteSettings, load_settings


PASTE_ENV_VARS = (
    'PASTE_RETENTION_SECONDS',
    'PASTE_ID_LENGTH',
    'PASTE_ID_ALPHABET',
    'PASTE_MAX_INSERT_ATTEMPTS',
    'SWEEP_INTERVAL_SECONDS',
    'PASTE_DURABLE_WRITES',
    'PASTE_FSYNC_TIMEOUT_MS',
    'PASTE_EXPECTED_DAILY_VOLUME',
    'PASTE_HALT_RECHECK_SECONDS',
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Start every test without paste settings in the environment."""
    for name in PASTE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# -------------------------------
# 1. PasteSettings defaults and validation
# -------------------------------


def test_default_settings():
    """Ensure defaults: 30 days retention, 10 Base62 chars, 5 attempts, hourly sweeps."""
    settings = PasteSettings()
    assert settings.retention == timedelta(days=30)
    assert settings.id_length == 10
    assert settings.id_alphabet == string.ascii_lowercase + string.ascii_uppercase + string.digits
    assert settings.max_insert_attempts == 5
    assert settings.sweep_interval == timedelta(hours=1)
    assert settings.durable_writes is True
    assert settings.fsync_timeout_ms == 1000
    assert settings.halt_recheck_interval == timedelta(minutes=1)


@pytest.mark.parametrize(
    'kwargs, message',
    [
        ({'retention': timedelta(0)}, 'Retention window must be positive'),
        ({'retention': timedelta(seconds=-1)}, 'Retention window must be positive'),
        ({'id_length': 0}, 'Paste id length must be positive'),
        ({'id_alphabet': 'a'}, 'at least two distinct characters'),
        ({'id_alphabet': 'abca'}, 'at least two distinct characters'),
        ({'id_alphabet': 'ab/'}, 'must be URL-safe'),
        ({'max_insert_attempts': 0}, 'Max insert attempts must be positive'),
        ({'sweep_interval': timedelta(0)}, 'Sweep interval must be positive'),
        ({'fsync_timeout_ms': -1}, 'Fsync timeout must not be negative'),
        ({'halt_recheck_interval': timedelta(0)}, 'Halt recheck interval must be positive'),
    ],
)
def test_invalid_settings(kwargs, message):
    """Ensure out-of-range settings raise BadConfigurationError."""
    with pytest.raises(BadConfigurationError, match=message):
        PasteSettings(**kwargs)


def test_url_safe_punctuation_is_allowed():
    """Ensure RFC 3986 unreserved punctuation may be used in ids."""
    assert PasteSettings(id_alphabet='ab-._~').id_alphabet == 'ab-._~'


def test_collision_probability_property():
    """Ensure the estimate covers a full retention window of expected pastes."""
    assert PasteSettings().collision_probability < 1e-6
    assert PasteSettings(id_length=3, expected_daily_volume=1000).collision_probability > 0.99


# -------------------------------
# 2. load_settings() environment parsing
# -------------------------------


def test_load_settings_defaults():
    """Ensure an empty environment yields default settings."""
    assert load_settings() == PasteSettings()


def test_load_settings_from_environment(monkeypatch):
    """Ensure every variable overrides its default."""
    monkeypatch.setenv('PASTE_RETENTION_SECONDS', '86400')
    monkeypatch.setenv('PASTE_ID_LENGTH', '12')
    monkeypatch.setenv('PASTE_ID_ALPHABET', 'abcdef0123456789')
    monkeypatch.setenv('PASTE_MAX_INSERT_ATTEMPTS', '3')
    monkeypatch.setenv('SWEEP_INTERVAL_SECONDS', '600')
    monkeypatch.setenv('PASTE_DURABLE_WRITES', 'false')
    monkeypatch.setenv('PASTE_FSYNC_TIMEOUT_MS', '250')
    monkeypatch.setenv('PASTE_EXPECTED_DAILY_VOLUME', '50')
    monkeypatch.setenv('PASTE_HALT_RECHECK_SECONDS', '30')

    settings = load_settings()

    assert settings.retention == timedelta(days=1)
    assert settings.id_length == 12
    assert settings.id_alphabet == 'abcdef0123456789'
    assert settings.max_insert_attempts == 3
    assert settings.sweep_interval == timedelta(minutes=10)
    assert settings.durable_writes is False
    assert settings.fsync_timeout_ms == 250
    assert settings.expected_daily_volume == 50
    assert settings.halt_recheck_interval == timedelta(seconds=30)


@pytest.mark.parametrize('name', ['PASTE_RETENTION_SECONDS', 'PASTE_ID_LENGTH', 'SWEEP_INTERVAL_SECONDS'])
def test_load_settings_with_non_integer(monkeypatch, name):
    """Ensure non-integer values raise BadConfigurationError naming the variable."""
    monkeypatch.setenv(name, 'thirty')
    with pytest.raises(BadConfigurationError, match=name):
        load_settings()


def test_load_settings_with_invalid_boolean(monkeypatch):
    """Ensure unrecognized booleans raise BadConfigurationError."""
    monkeypatch.setenv('PASTE_DURABLE_WRITES', 'maybe')
    with pytest.raises(BadConfigurationError, match='PASTE_DURABLE_WRITES'):
        load_settings()


def test_load_settings_with_out_of_range_value(monkeypatch):
    """Ensure values parsed from the environment are validated too."""
    monkeypatch.setenv('PASTE_RETENTION_SECONDS', '0')
    with pytest.raises(BadConfigurationError, match='Retention window must be positive'):
        load_settings()


def test_load_settings_warns_about_small_id_space(monkeypatch, caplog):
    """Ensure a too small id space is logged as a warning."""
    monkeypatch.setenv('PASTE_ID_LENGTH', '4')

    with caplog.at_level(logging.WARNING, logger='mdow.utils.settings'):
        settings = load_settings()

    assert settings.id_length == 4
    assert 'id space is too small' in caplog.text


def test_load_settings_does_not_warn_by_default(caplog):
    """Ensure default settings don't log a warning."""
    with caplog.at_level(logging.WARNING, logger='mdow.utils.settings'):
        load_settings()
    assert caplog.records == []
