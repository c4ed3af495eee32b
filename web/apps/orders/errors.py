"""Domain errors raised by the orders core.

Every error carries a short machine-readable ``code`` (the same style of
upper-case codes the HTTP layer returns in ``{"detail": ...}``) and a
human-readable message. Views map each class to an HTTP status.
"""


class OrderDomainError(Exception):
    """Base class for all failures produced by the orders core."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class NotFound(OrderDomainError):
    """The resource does not exist, or is hidden from the caller."""

    code = "NOT_FOUND"


class AccessDenied(OrderDomainError):
    """The resource exists and the caller is known to lack access."""

    code = "FORBIDDEN"


class InvalidArgument(OrderDomainError, ValueError):
    """Malformed input such as an empty item list or a zero quantity."""

    code = "INVALID_ARGUMENT"


class InvalidStateTransition(OrderDomainError, ValueError):
    """The requested status change is not allowed from the current status."""

    code = "INVALID_STATE_TRANSITION"


class CatalogUnavailable(OrderDomainError):
    """The catalog service could not be reached (circuit open or retries exhausted)."""

    code = "UPSTREAM_UNAVAILABLE"
