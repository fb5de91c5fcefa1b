"""
Custom Exceptions

Error kinds raised by the link registry. The HTTP layer maps each kind
to a status code:

- InvalidURLError, InvalidCodeError -> 400
- CodeConflictError -> 409
- LinkNotFoundError -> 404
- StorageUnavailableError -> 500 (details are logged, never returned)
"""

from typing import Optional


class ShortLinkError(Exception):
    """Base exception for the short link service."""
    pass


class InvalidURLError(ShortLinkError):
    """Raised when the target URL is not an absolute http(s) URL."""

    def __init__(self, url: str, reason: str = "Invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url!r}")


class InvalidCodeError(ShortLinkError):
    """Raised when a caller-supplied code is malformed or reserved."""

    def __init__(self, code: str, reason: str = "Code must be 6-8 letters/numbers"):
        self.code = code
        self.reason = reason
        super().__init__(f"{reason}: {code!r}")


class CodeConflictError(ShortLinkError):
    """
    Raised when a code is already taken.

    For generated codes this is only raised once every retry collided,
    in which case ``generated`` is True and ``attempts`` tells how many
    candidates were tried.
    """

    def __init__(self, code: str, generated: bool = False, attempts: int = 1):
        self.code = code
        self.generated = generated
        self.attempts = attempts
        if generated:
            message = f"Could not allocate a free code after {attempts} attempts"
        else:
            message = f"Code '{code}' already exists"
        super().__init__(message)


class LinkNotFoundError(ShortLinkError):
    """Raised when a short code does not exist."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Code '{code}' not found")


class StorageUnavailableError(ShortLinkError):
    """Raised when a database operation fails for any non-conflict reason."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")
