"""Paste expiry policy

A paste lives for a fixed retention window after it is created. The moment
`now` reaches `expires_at` the paste is expired, whether or not it was already
pruned from storage.

Functions:
    compute_expires_at(created_at, retention) -> datetime
        Absolute expiry moment for a paste created at `created_at`.
    is_live(expires_at, now=None) -> bool
        True while `now < expires_at`.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> created = datetime(2025, 10, 1, tzinfo=UTC)
    >>> expires = compute_expires_at(created, timedelta(days=30))
    >>> expires
    datetime.datetime(2025, 10, 31, 0, 0, tzinfo=datetime.timezone.utc)
    >>> is_live(expires, now=expires)
    False
"""

from datetime import datetime, timedelta, UTC


def compute_expires_at(created_at: datetime, retention: timedelta) -> datetime:
    return created_at + retention


def is_live(expires_at: datetime, now: datetime | None = None) -> bool:
    """Return True if a paste expiring at `expires_at` is still retrievable.

    NOTE: the boundary `now == expires_at` counts as expired.

    Args:
        expires_at (datetime): Absolute expiry moment of the paste.
        now (datetime | None): Reference moment. Defaults to the current UTC time.

    Returns:
        bool: True if now < expires_at, False otherwise.
    """
    if now is None:
        now = datetime.now(UTC)
    return now < expires_at
