"""
Typed errors raised by the comparison engine and the table store boundary.

Parsing and grid decoding never raise: they drop what they cannot read.
"""


class KinshipError(Exception):
    """Base class for all application errors."""

    pass


class NotFoundError(KinshipError, LookupError):
    """Raised when a sample or case lookup fails."""

    pass


class InvalidInputError(KinshipError, ValueError):
    """Raised when sample data passed to a comparison is missing or malformed."""

    pass


class BackingStoreError(KinshipError):
    """Raised when the table store fails. The original error is chained."""

    pass
