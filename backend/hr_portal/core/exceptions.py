"""Error taxonomy for the access-control core.

Services raise these; ``hr_portal.main`` maps them onto HTTP status codes
(400 / 404 / 403). None of them are retried.
"""


class AccessControlError(Exception):
    """Base class for errors surfaced to the caller with a message."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AccessControlError):
    """Malformed or missing input, self-ownership, bad date range."""

    status_code = 400


class InvalidIdentifier(ValidationError):
    """An external identifier could not be decoded."""


class NotFoundError(AccessControlError):
    """Unknown resource, access request or delegation id."""

    status_code = 404


class ForbiddenError(AccessControlError):
    """Ownership or approval check failed; resolvable via an access request."""

    status_code = 403
