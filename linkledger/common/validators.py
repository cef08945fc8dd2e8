"""Validation utilities for the link ledger."""

import re
from urllib.parse import urlparse
from typing import Tuple


MAX_URL_LENGTH = 2048

# Codes that would shadow a top-level route
RESERVED_CODES = {"healthz"}


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # Accessing .port raises on a malformed port
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_code(code: str, min_length: int = 6, max_length: int = 8) -> Tuple[bool, str]:
    """Validate a user-supplied short code.

    Args:
        code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not code or not isinstance(code, str):
        return False, "Code is required"

    if len(code) < min_length:
        return False, f"Code must be at least {min_length} characters"

    if len(code) > max_length:
        return False, f"Code must be at most {max_length} characters"

    if not re.fullmatch(r'[A-Za-z0-9]+', code):
        return False, "Code can only contain letters and numbers"

    if code.lower() in RESERVED_CODES:
        return False, f"'{code}' is a reserved word and cannot be used"

    return True, ""
