import string
from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Paste retention window (data retention period) (30 days in seconds)
    THIRTY_DAYS = 2_592_000  # 60 * 60 * 24 * 30
    # Expiry sweep interval
    ONE_HOUR = 3_600


class Defaults:
    """Default paste store settings."""

    ID_LENGTH = 10  # 62**10 ~ 8.4e17 possible paste ids
    ID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    MAX_INSERT_ATTEMPTS = 5
    FSYNC_TIMEOUT_MS = 1_000
    EXPECTED_DAILY_VOLUME = 10_000
    PRUNE_BATCH_SIZE = 500
    REDIS_SOCKET_TIMEOUT = 5.0  # seconds, doubles as request-level timeout
    UNAVAILABLE_RETRY_AFTER = 5  # seconds, Retry-After for 503 responses
    HALT_RECHECK_SECONDS = 60  # seconds a write halt holds before the data store is checked again


# Highest acceptable birthday-bound collision probability for the configured id space
COLLISION_WARNING_THRESHOLD = 1e-3


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Paste(StrEnum):
        RETENTION_SECONDS = 'PASTE_RETENTION_SECONDS'
        ID_LENGTH = 'PASTE_ID_LENGTH'
        ID_ALPHABET = 'PASTE_ID_ALPHABET'
        MAX_INSERT_ATTEMPTS = 'PASTE_MAX_INSERT_ATTEMPTS'
        SWEEP_INTERVAL_SECONDS = 'SWEEP_INTERVAL_SECONDS'
        DURABLE_WRITES = 'PASTE_DURABLE_WRITES'
        FSYNC_TIMEOUT_MS = 'PASTE_FSYNC_TIMEOUT_MS'
        EXPECTED_DAILY_VOLUME = 'PASTE_EXPECTED_DAILY_VOLUME'
        HALT_RECHECK_SECONDS = 'PASTE_HALT_RECHECK_SECONDS'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
