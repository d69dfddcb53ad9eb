"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Collaborator failures (Order Store, courier portal) get their own branches so
the dispatcher can tell a fatal setup failure from a per-order one.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConfigurationError(DomainException):
    """Required settings are missing or invalid."""


# ---------------------------------------------------------------------------
# Order Store
# ---------------------------------------------------------------------------


class StoreError(DomainException):
    """The Order Store rejected or failed a request."""


class NotFoundError(StoreError, EntityNotFoundError):
    """The Order Store has no record with the requested id."""


class UnauthorizedError(StoreError):
    """The admin token was rejected by the Order Store."""


class UnavailableError(StoreError):
    """The Order Store could not be reached or answered with garbage."""


class FetchError(DomainException):
    """A dispatch run could not load the orders it was asked to book."""


# ---------------------------------------------------------------------------
# Courier portal
# ---------------------------------------------------------------------------


class PortalError(DomainException):
    """Base class for courier portal failures."""


class AuthError(PortalError):
    """The portal rejected the login."""


class SubmissionError(PortalError):
    """Filling or submitting the booking form failed or timed out."""


class SessionExpired(SubmissionError):
    """The portal reported a logged-out session during submission."""


class IndeterminateBooking(PortalError):
    """The booking was submitted but no tracking id could be confirmed."""
