"""Unit tests for the PasteModel dataclass in paste_model.py.

Test coverage includes:

1. Model creation
   - Ensures instances can be created with valid field values.

2. Equality semantics
   - Confirms that models with identical data compare equal.
   - Ensures that differing field values produce non-equal instances.

3. Immutability
   - Verifies that all fields are frozen after object creation.
"""

from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timedelta, UTC

import pytest

from mdow.models import PasteModel


CREATED_AT = datetime(2025, 10, 1, tzinfo=UTC)


@pytest.fixture
def paste():
    return PasteModel(
        paste_id='aB3dE5gH7j',
        content='# Title\n\n- item',
        created_at=CREATED_AT,
        expires_at=CREATED_AT + timedelta(days=30),
    )


# -------------------------------------------------
# 1. Model creation
# -------------------------------------------------


def test_valid_paste_model_creation(paste):
    """Ensure PasteModel can be created with valid data."""
    assert paste.paste_id == 'aB3dE5gH7j'
    assert paste.content == '# Title\n\n- item'
    assert paste.expires_at - paste.created_at == timedelta(days=30)


# -------------------------------------------------
# 2. Equality semantics
# -------------------------------------------------


def test_paste_model_equality(paste):
    """Confirm models with identical data compare equal."""
    assert paste == replace(paste)


@pytest.mark.parametrize(
    'changes',
    [
        {'paste_id': 'Zz9Yy8Xx7W'},
        {'content': '# Other'},
        {'expires_at': CREATED_AT + timedelta(days=1)},
    ],
)
def test_paste_model_inequality(paste, changes):
    """Ensure differing field values produce non-equal instances."""
    assert paste != replace(paste, **changes)


# -------------------------------------------------
# 3. Immutability
# -------------------------------------------------


@pytest.mark.parametrize('field', ['paste_id', 'content', 'created_at', 'expires_at'])
def test_paste_model_is_frozen(paste, field):
    """Verify fields can't be reassigned."""
    with pytest.raises(FrozenInstanceError):
        setattr(paste, field, None)
