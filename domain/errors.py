# cashwrap/domain/errors.py


class ReceiptTrackerError(Exception):
    """Base class for every rejected operation."""


class ValidationError(ReceiptTrackerError, ValueError):
    """Input is malformed or out of range (e.g. consumption outside the series)."""


class PreconditionError(ReceiptTrackerError):
    """The entity is not in a state that allows the operation."""


class NotFoundError(ReceiptTrackerError, LookupError):
    """The referenced order, branch or inventory row does not exist."""
