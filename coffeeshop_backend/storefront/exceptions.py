# storefront/exceptions.py

"""
STOREFRONT CLIENT ERRORS
"""


class StorefrontError(Exception):
    """Base exception for all client-side failures."""


class TransportError(StorefrontError):
    """Backend unreachable, timed out, or answered with a non-2xx status."""


class ProtocolError(StorefrontError):
    """Backend answered, but not with JSON (e.g. an HTML error page)."""


class BackendError(StorefrontError):
    """Backend returned an error envelope."""

    def __init__(self, message: str, *, code: str = "", retryable: bool = False, status=None):
        super().__init__(message)
        self.code = code
        self.retryable = retryable
        self.status = status


class CheckoutValidationError(StorefrontError):
    """Order refused before submission (nothing was sent)."""


class DuplicateSubmissionError(StorefrontError):
    """The same action is already in flight."""


class SyncFailedError(StorefrontError):
    """An optimistic local change was not confirmed by the backend."""
