"""
Error taxonomy for memory access.

Every error is terminal for the request. The API layer maps each class to an
HTTP status through ``status_code``.
"""


class MemoriesError(Exception):
    """Base class for domain errors."""

    status_code = 500
    kind = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(MemoriesError):
    """Malformed input (schema mismatch)."""

    status_code = 400
    kind = "validation_error"


class Unauthorized(MemoriesError):
    """Missing or invalid bearer token on a protected route."""

    status_code = 401
    kind = "unauthorized"


class Forbidden(MemoriesError):
    """Authenticated but not the owner, or private and not the owner.

    Reported with the same status as ``Unauthorized``.
    """

    status_code = 401
    kind = "unauthorized"


class NotFound(MemoriesError):
    """Referenced memory or user does not exist."""

    status_code = 404
    kind = "not_found"


class IdentityProviderError(MemoriesError):
    """The external identity provider could not be reached or refused the code."""

    status_code = 502
    kind = "identity_provider_error"
