"""
Input sanitization utilities for request parameters.
Provides functions to clean and validate string inputs.
"""

import html
import re
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    # Remove leading/trailing whitespace and dangerous characters
    value = value.strip()
    # Remove control characters
    value = re.sub(r'[\x00-\x1F\x7F]', '', value)
    # Escape HTML special characters, quotes included
    return html.escape(value, quote=True)


def sanitize_receipt_number(value: Optional[str]) -> str:
    """Clean a receipt number taken from the query string or path.

    Returns an empty string when nothing usable is left; callers treat that
    as a bad request.
    """
    return sanitize_string(value) or ""
