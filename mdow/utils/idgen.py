"""Paste id generation utility

This module provides helpers for generating short, random, URL-safe paste ids
and for estimating how likely the configured id space is to collide.

Functions:
    generate_paste_id(length=10, alphabet=ALPHABET):
        Generate a random paste id suitable for use as a URL slug.

    collision_probability(count, length=10, alphabet=ALPHABET):
        Birthday-bound probability that any two of `count` ids collide.

Example:
    >>> from mdow.utils import generate_paste_id
    >>> generate_paste_id()
    'q8ZkP2mWx0'
    >>> collision_probability(300_000, length=10)
    5.35...e-08
"""

import math
import secrets

from mdow.constants import Defaults


ALPHABET = Defaults.ID_ALPHABET  # Base62: 26 lowercase + 26 uppercase + 10 digits


def generate_paste_id(length: int = Defaults.ID_LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random, non-sequential paste id.

    Every character is drawn independently from `alphabet` with the `secrets`
    module, so ids can't be enumerated from one another. Collisions are not
    prevented here; the paste store detects them on insert and retries.

    Args:
        length (int, optional):
            Number of characters in the id. Defaults to 10.

        alphabet (str, optional):
            Characters to draw from. Defaults to Base62 ([a-zA-Z0-9]).

    Returns:
        str: A random id of exactly `length` characters.

    Example:
        >>> generate_paste_id(length=7)
        'Gh71WPT'
    """
    if not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(alphabet, str):
        raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
    if len(set(alphabet)) < 2:
        raise ValueError(f'Alphabet must contain at least two distinct characters (given value: {alphabet!r}).')

    return ''.join(secrets.choice(alphabet) for _ in range(length))


def collision_probability(count: int, length: int = Defaults.ID_LENGTH, alphabet: str = ALPHABET) -> float:
    """Estimate the probability of at least one collision among `count` random ids.

    Uses the birthday approximation 1 - exp(-n(n-1) / 2N), where N is the
    size of the id space (len(alphabet) ** length).

    Args:
        count (int):
            Number of ids expected to coexist (e.g. pastes per day * retention days).

        length (int, optional):
            Id length. Defaults to 10.

        alphabet (str, optional):
            Id alphabet. Defaults to Base62.

    Returns:
        float: Probability in [0, 1].

    Example:
        >>> collision_probability(1, length=4)
        0.0
    """
    if count < 2:
        return 0.0
    space = len(set(alphabet)) ** length
    return -math.expm1(-count * (count - 1) / (2 * space))
