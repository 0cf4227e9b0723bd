"""
Exceptions raised by the surface finder.

Usage and construction errors signal a programming error or a malformed cell
and are not meant to be caught by a grid walker. Out-of-range accessors raise
the builtin ``IndexError`` instead.
"""


class CorneliusError(RuntimeError):
    """Base class for all surface finder errors."""


class UsageError(CorneliusError):
    """The facade or an engine was called in a way its contract forbids."""


class ConstructionError(CorneliusError):
    """A cell could not be turned into consistent surface elements."""
