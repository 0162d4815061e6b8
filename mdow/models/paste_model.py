from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PasteModel:
    """Represent a stored markdown paste.

    Attributes:
        paste_id (str):
            Short, URL-safe identifier addressing the paste.
        content (str):
            Raw markdown source. Never changes after insertion.
        created_at (datetime):
            UTC moment the paste was inserted.
        expires_at (datetime):
            UTC moment the paste stops being retrievable.
            Always created_at + retention window.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> paste = PasteModel(
        ...     paste_id='aB3dE5gH7j',
        ...     content='# Hello',
        ...     created_at=now,
        ...     expires_at=now + timedelta(days=30),
        ... )
        >>> paste.content
        '# Hello'
        >>> paste.expires_at - paste.created_at
        datetime.timedelta(days=30)
    """

    paste_id: str
    content: str
    created_at: datetime
    expires_at: datetime
