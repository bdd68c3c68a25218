"""Canonical, order-independent keys for element pairs."""

from ..config import ELEMENT_NAME_MAX_LENGTH
from ..errors import InvalidIdentifier


def validate_name(name) -> str:
    """Reject names that can never be stored. Names are kept exactly as given."""
    if not isinstance(name, str):
        raise InvalidIdentifier(f"element name must be a string, got {type(name).__name__}")
    if not name.strip():
        raise InvalidIdentifier("element name is required")
    if len(name) > ELEMENT_NAME_MAX_LENGTH:
        raise InvalidIdentifier(
            f"element name is longer than {ELEMENT_NAME_MAX_LENGTH} characters"
        )
    return name


def canonicalize(a: str, b: str) -> tuple[str, str]:
    """Order a pair so that canonicalize(a, b) == canonicalize(b, a)."""
    if a <= b:
        return a, b
    return b, a
