"""Lightweight validation helpers."""

from typing import Any

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy."""
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def exceeds_size_limit(size_bytes: int, limit_bytes: int) -> bool:
    """True when an upload is larger than the allowed limit (inclusive bound)."""
    return size_bytes > limit_bytes
