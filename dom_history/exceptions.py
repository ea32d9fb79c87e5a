"""
Exceptions raised by the DOM history package.
"""


class DOMHistoryError(Exception):
    """Base class for DOM history errors."""


class SnapshotUnavailableError(DOMHistoryError):
    """The snapshot provider could not produce a DOM tree."""


class MalformedTreeError(DOMHistoryError):
    """A DOM tree is not a well-formed, acyclic element tree."""
