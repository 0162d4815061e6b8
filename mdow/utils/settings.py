"""Paste store settings

Settings are read once from environment variables at process start and never
reloaded.

Classes:
    PasteSettings:
        Retention window, id space, insert attempt limit, sweep interval,
        durability and write halt options of the paste store.

Functions:
    load_settings() -> PasteSettings
        Build PasteSettings from environment variables (see ENV.Paste).

Example:
    >>> os.environ['PASTE_RETENTION_SECONDS'] = '86400'
    >>> load_settings().retention
    datetime.timedelta(days=1)
"""

import os
import logging
from dataclasses import dataclass, field
from datetime import timedelta

from mdow.constants import TTL, Defaults, ENV, COLLISION_WARNING_THRESHOLD
from mdow.exceptions import BadConfigurationError
from mdow.utils.idgen import collision_probability


logger = logging.getLogger(__name__)

URL_SAFE_CHARACTERS = frozenset(Defaults.ID_ALPHABET + '-._~')  # RFC 3986 unreserved characters


@dataclass(frozen=True)
class PasteSettings:
    """Paste store settings.

    Attributes:
        retention (timedelta):
            How long a paste stays retrievable after creation. Defaults to 30 days.
        id_length (int):
            Number of characters in a paste id. Defaults to 10.
        id_alphabet (str):
            URL-safe characters paste ids are drawn from. Defaults to Base62.
        max_insert_attempts (int):
            How many ids an insert tries before giving up. Defaults to 5.
        sweep_interval (timedelta):
            Pause between two expiry sweeps. Defaults to 1 hour.
        durable_writes (bool):
            Wait for the authoritative node's AOF fsync before acknowledging writes.
        fsync_timeout_ms (int):
            How long to wait for the AOF fsync, in milliseconds.
        halt_recheck_interval (timedelta):
            How long a write halt holds before the data store is health-checked
            again and writes resume if it answers. Defaults to 1 minute.
        expected_daily_volume (int):
            Expected pastes per day. Only used to warn about a too small id space.
    """

    retention: timedelta = timedelta(seconds=TTL.THIRTY_DAYS)
    id_length: int = Defaults.ID_LENGTH
    id_alphabet: str = Defaults.ID_ALPHABET
    max_insert_attempts: int = Defaults.MAX_INSERT_ATTEMPTS
    sweep_interval: timedelta = timedelta(seconds=TTL.ONE_HOUR)
    durable_writes: bool = True
    fsync_timeout_ms: int = Defaults.FSYNC_TIMEOUT_MS
    halt_recheck_interval: timedelta = timedelta(seconds=Defaults.HALT_RECHECK_SECONDS)
    expected_daily_volume: int = field(default=Defaults.EXPECTED_DAILY_VOLUME, compare=False)

    def __post_init__(self) -> None:
        if self.retention <= timedelta(0):
            raise BadConfigurationError(f'Retention window must be positive (given value: {self.retention}).')
        if self.id_length < 1:
            raise BadConfigurationError(f'Paste id length must be positive (given value: {self.id_length}).')
        if len(set(self.id_alphabet)) != len(self.id_alphabet) or len(self.id_alphabet) < 2:
            raise BadConfigurationError(f'Paste id alphabet must hold at least two distinct characters (given value: {self.id_alphabet!r}).')
        if not set(self.id_alphabet) <= URL_SAFE_CHARACTERS:
            unsafe = ''.join(sorted(set(self.id_alphabet) - URL_SAFE_CHARACTERS))
            raise BadConfigurationError(f'Paste id alphabet must be URL-safe (unsafe characters: {unsafe!r}).')
        if self.max_insert_attempts < 1:
            raise BadConfigurationError(f'Max insert attempts must be positive (given value: {self.max_insert_attempts}).')
        if self.sweep_interval <= timedelta(0):
            raise BadConfigurationError(f'Sweep interval must be positive (given value: {self.sweep_interval}).')
        if self.fsync_timeout_ms < 0:
            raise BadConfigurationError(f'Fsync timeout must not be negative (given value: {self.fsync_timeout_ms}).')
        if self.halt_recheck_interval <= timedelta(0):
            raise BadConfigurationError(f'Halt recheck interval must be positive (given value: {self.halt_recheck_interval}).')

    @property
    def collision_probability(self) -> float:
        """Birthday-bound collision probability for a full retention window of pastes"""
        population = int(self.expected_daily_volume * self.retention / timedelta(days=1))
        return collision_probability(population, length=self.id_length, alphabet=self.id_alphabet)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise BadConfigurationError(f"Environment variable '{name}' must be an integer (given value: {raw!r}).") from e


def _bool_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    if raw.lower() in ('true', '1', 'yes'):
        return True
    if raw.lower() in ('false', '0', 'no'):
        return False
    raise BadConfigurationError(f"Environment variable '{name}' must be a boolean (given value: {raw!r}).")


def load_settings() -> PasteSettings:
    """Build paste store settings from environment variables

    Logs a warning when the configured id space is likely to produce
    collisions for the expected paste volume.

    Returns:
        PasteSettings: validated settings

    Raises:
        BadConfigurationError:
            If any variable is malformed or out of range.
    """
    settings = PasteSettings(
        retention=timedelta(seconds=_int_from_env(ENV.Paste.RETENTION_SECONDS, TTL.THIRTY_DAYS)),
        id_length=_int_from_env(ENV.Paste.ID_LENGTH, Defaults.ID_LENGTH),
        id_alphabet=os.getenv(ENV.Paste.ID_ALPHABET) or Defaults.ID_ALPHABET,
        max_insert_attempts=_int_from_env(ENV.Paste.MAX_INSERT_ATTEMPTS, Defaults.MAX_INSERT_ATTEMPTS),
        sweep_interval=timedelta(seconds=_int_from_env(ENV.Paste.SWEEP_INTERVAL_SECONDS, TTL.ONE_HOUR)),
        durable_writes=_bool_from_env(ENV.Paste.DURABLE_WRITES, True),
        fsync_timeout_ms=_int_from_env(ENV.Paste.FSYNC_TIMEOUT_MS, Defaults.FSYNC_TIMEOUT_MS),
        halt_recheck_interval=timedelta(seconds=_int_from_env(ENV.Paste.HALT_RECHECK_SECONDS, Defaults.HALT_RECHECK_SECONDS)),
        expected_daily_volume=_int_from_env(ENV.Paste.EXPECTED_DAILY_VOLUME, Defaults.EXPECTED_DAILY_VOLUME),
    )

    probability = settings.collision_probability
    if probability > COLLISION_WARNING_THRESHOLD:
        logger.warning(
            'Paste id space is too small for the expected volume; inserts will retry often.',
            extra={
                'collision_probability': probability,
                'id_length': settings.id_length,
                'alphabet_size': len(settings.id_alphabet),
            },
        )
    return settings
