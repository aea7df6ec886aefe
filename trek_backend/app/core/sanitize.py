"""
Input sanitizing and format checks shared by the request schemas.
"""

import html
import re
from urllib.parse import urlparse

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
PHONE_PATTERN = re.compile(r"^[0-9\-\+\s]{8,20}$")


def sanitize_html(value):
    """
    HTML-escape user text before storage.

    Escapes ``& < > " '`` and ``/``. Non-string values pass through.
    """
    if not isinstance(value, str):
        return value
    return html.escape(value, quote=True).replace("/", "&#x2F;")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_PATTERN.match(value))


def is_http_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    host = parsed.hostname or ""
    return "javascript:" not in host and "data:" not in host


def count_words(value: str) -> int:
    return len(value.split())


# Longest entity ``sanitize_html`` produces for one character (``&#x27;``)
MAX_ESCAPE_EXPANSION = 6


def escaped_length(max_length: int) -> int:
    """Column size that holds ``max_length`` characters after escaping."""
    return max_length * MAX_ESCAPE_EXPANSION
