"""Shared building blocks used by more than one feature."""

from app.shared.models import TimestampMixin, utc_now

__all__ = [
    "TimestampMixin",
    "utc_now",
]
