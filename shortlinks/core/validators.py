"""
Input Validators and Code Generation

This module decides whether user input is acceptable before it reaches
the database, and produces random candidate short codes.

Short codes:
- 6 to 8 characters
- Alphabet: [A-Za-z0-9] (62 symbols)
- Generated codes are always 6 characters long

Uniqueness is NOT decided here. A generated code is only a candidate,
the unique constraint on links.code has the final word.
"""

import re
import secrets
import string
from typing import Any
from urllib.parse import urlparse

CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
GENERATED_CODE_LENGTH = 6
MIN_CODE_LENGTH = 6
MAX_CODE_LENGTH = 8
MAX_URL_LENGTH = 2048

ALLOWED_URL_SCHEMES = {"http", "https"}

_CODE_PATTERN = re.compile(
    rf"^[A-Za-z0-9]{{{MIN_CODE_LENGTH},{MAX_CODE_LENGTH}}}$"
)


def is_valid_code(code: Any) -> bool:
    """
    Check that a caller-supplied short code is well formed.

    Args:
        code: The code to check (any type is accepted)

    Returns:
        True if code is a 6-8 character alphanumeric string, False otherwise

    Example:
        is_valid_code("abc123") -> True
        is_valid_code("abc")    -> False
        is_valid_code("abc-12") -> False
    """
    if not isinstance(code, str):
        return False
    # fullmatch so a trailing newline cannot sneak past "$"
    return _CODE_PATTERN.fullmatch(code) is not None


def generate_code(length: int = GENERATED_CODE_LENGTH) -> str:
    """Generate a random candidate code (uniqueness is not guaranteed)."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def is_valid_url(url: Any) -> bool:
    """
    Validate that a target URL is an absolute http(s) URL.

    Checks that the URL is a string of reasonable length, contains no
    whitespace, uses http/https and has a host. A port, when present,
    must parse as a number in range.

    Only http and https are accepted; ftp:, mailto: and javascript:
    targets are rejected even though they parse as absolute URLs.

    Args:
        url: The URL string to validate

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if len(url) > MAX_URL_LENGTH:
        return False

    if any(ch.isspace() for ch in url):
        return False

    try:
        result = urlparse(url)

        if result.scheme.lower() not in ALLOWED_URL_SCHEMES:
            return False

        if not result.hostname:
            return False

        # Raises ValueError for "http://example.com:99999" and friends
        result.port
    except ValueError:
        return False

    return True
