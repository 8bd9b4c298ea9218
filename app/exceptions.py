# app/exceptions.py
"""
Error taxonomy shared by the gateway, the services and the HTTP layer.
main.py maps each class to a status code.
"""

import enum


class ErrorKind(str, enum.Enum):
    SCHEMA_MISSING = "schema_missing"
    CONSTRAINT = "constraint"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class MarketplaceError(Exception):
    """Base class for every error the API reports to a caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """Caller input failed a precondition. Raised before any write."""


class NotFoundError(MarketplaceError):
    """Lookup by id / ownership filter returned no row."""


class AuthenticationRequiredError(MarketplaceError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PersistenceError(MarketplaceError):
    """The store (or a hosted service in front of it) rejected or failed a call."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UNKNOWN, detail: str = ""):
        super().__init__(message)
        self.kind = kind
        self.detail = detail

    def __repr__(self):
        return f"<PersistenceError kind={self.kind.value} message={self.message!r}>"
