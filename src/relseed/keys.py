"""Built-in key generators for common key shapes."""

import random
import uuid
from collections.abc import Callable

from relseed.models import KeyGenerator


def sequential_int(index: int) -> int:
    """Sequential integer keys: 1, 2, 3, ..."""
    return index


def sequential_str(index: int) -> str:
    """Sequential string keys: "1", "2", "3", ..."""
    return str(index)


def new_uuid(index: int) -> uuid.UUID:
    """Fresh random UUID per entity (not reproducible)."""
    return uuid.uuid4()


def string_format(fmt: str) -> KeyGenerator:
    """
    String keys from a format pattern.

    Args:
        fmt: str.format pattern, {0} is the 1-based index

    Returns:
        Key generator

    Example:
        >>> string_format("ORD-{0:04d}")(7)
        'ORD-0007'
    """
    if fmt is None:
        raise TypeError("fmt must not be None")
    return lambda index: fmt.format(index)


def seeded_uuid(rng: random.Random) -> KeyGenerator:
    """UUID4-shaped keys drawn from a seeded random source."""
    return lambda index: uuid.UUID(int=rng.getrandbits(128), version=4)


def default_key_generator(
    key_type: object, rng: random.Random | None = None
) -> Callable[[int], object] | None:
    """
    Pick the default key generator for a key shape.

    Args:
        key_type: Key type annotation (int, str or uuid.UUID)
        rng: Seeded random source for UUID keys, None for uuid4

    Returns:
        Key generator, or None when the shape has no default
    """
    # bool is an int subclass but never a sensible key
    if key_type is bool:
        return None
    if key_type is int:
        return sequential_int
    if key_type is str:
        return sequential_str
    if key_type is uuid.UUID:
        return seeded_uuid(rng) if rng is not None else new_uuid
    return None
