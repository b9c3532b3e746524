"""
Domain errors.

Every error derives from ValueError so the API layer can keep
mapping business failures to HTTP 400 with a single except
clause. NotFoundError is the one the routers single out (404).
"""


class FreightOpsError(ValueError):
    """Base class for business rule failures."""
    pass


class ValidationError(FreightOpsError):
    """Raised when input is malformed or breaks a business rule."""
    pass


class NotFoundError(FreightOpsError):
    """Raised when a referenced entity does not exist."""
    pass


class UnbalancedJournalError(ValidationError):
    """Raised when a journal entry fails the double-entry balance check."""
    pass


class InvalidStatusTransition(ValidationError):
    """Raised when an LTA status change is not allowed."""
    pass


class InsufficientFundsError(ValidationError):
    """Raised when a treasury withdrawal exceeds the available balance."""
    pass
