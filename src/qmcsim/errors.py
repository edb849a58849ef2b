"""
Exception types raised by qmcsim.

Every error is raised at the point of detection and is fatal to the call
that raised it; nothing in the library retries.
"""

from __future__ import annotations


class QmcSimError(Exception):
    """Base class for all qmcsim errors."""


class InvalidSeedError(QmcSimError, ValueError):
    """Seed vector has the wrong length, an all-zero block, or a value out of range."""


class UnsupportedParameterError(QmcSimError, ValueError):
    """Parameter outside the discrete set an algorithm supports (e.g. alpha for P-alpha)."""


class ConcurrentModificationError(QmcSimError, RuntimeError):
    """An event list changed structurally while it was being iterated."""


class IllegalStateError(QmcSimError, RuntimeError):
    """Operation not allowed in the object's current state."""


class EventNotFoundError(IllegalStateError):
    """Reference event is not present in the event list."""
