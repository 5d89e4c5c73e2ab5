"""Exception hierarchy for bioplanes.

Plane lookups that fall outside a dataset are not errors: they return ``None``.
"""


class BioplanesError(Exception):
    """Base exception for bioplanes operations."""

    pass


class OpenError(BioplanesError):
    """Dataset path is unreadable or its format is not recognized."""

    pass


class ReaderIOError(BioplanesError, OSError):
    """I/O failure while the format reader fetched plane bytes."""

    pass


class FormatError(BioplanesError):
    """The format reader rejected a plane request or returned malformed metadata."""

    pass


class DecodeError(BioplanesError, ValueError):
    """Raw plane bytes could not be turned into a typed image."""

    pass


class UseAfterClose(BioplanesError, RuntimeError):
    """A dataset was queried after it was closed."""

    pass
