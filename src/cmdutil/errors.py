"""Exceptions raised for caller programming errors."""


class PreconditionError(AssertionError):
    """A library function was called with bad arguments or before it was configured."""
