"""ID generation and validation utilities."""

import itertools
import uuid
from datetime import datetime, timezone
from typing import Callable, NewType

# Type aliases for different ID types
PlayId = NewType("PlayId", str)
PlayerId = NewType("PlayerId", str)
ActionId = NewType("ActionId", str)
FormationKey = NewType("FormationKey", str)
ConceptId = NewType("ConceptId", str)

Clock = Callable[[], datetime]


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix."""
    unique = str(uuid.uuid4())[:8]
    return f"{prefix}_{unique}" if prefix else unique


def validate_id(id_value: str) -> bool:
    """Validate that an ID is non-empty and reasonable length."""
    return bool(id_value) and len(id_value) < 128


class IdFactory:
    """Source of identifiers for generated records (uuid4 by default)."""

    def new_id(self, prefix: str = "") -> str:
        return generate_id(prefix)


class SequentialIdFactory(IdFactory):
    """Deterministic ids (prefix_1, prefix_2, ...) for reproducible output."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def new_id(self, prefix: str = "") -> str:
        value = next(self._counter)
        return f"{prefix}_{value}" if prefix else str(value)


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)
