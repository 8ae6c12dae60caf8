"""Utility functions for hashing and dispatch timestamps."""

from .hashing import hash_string, short_digest
from .timestamps import DispatchClock, epoch_millis, utc_now

__all__ = [
    # Hashing
    "hash_string",
    "short_digest",
    # Timestamps
    "DispatchClock",
    "epoch_millis",
    "utc_now",
]
