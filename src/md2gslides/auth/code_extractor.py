"""
Authorization code extraction for md2gslides.

Users either paste the full redirect URL their browser landed on or just the
value of its ``code`` parameter. Both forms are accepted here.
"""

import logging
import re
from urllib.parse import parse_qs, unquote, urlsplit

from ..utils.errors import InputError, InputErrorReason

logger = logging.getLogger(__name__)

URL_PREFIXES = ("http://", "https://")

# A '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _decode_once(value: str) -> str:
    """Percent-decode ``value`` once, raising ValueError on bad escapes."""
    if _BAD_ESCAPE.search(value):
        raise ValueError("Invalid percent escape")
    return unquote(value, errors="strict")


def _code_from_url(url: str) -> str:
    try:
        parts = urlsplit(url)
        # Accessing the port validates it
        parts.port
    except ValueError as e:
        raise InputError(
            "Invalid URL format. Please provide either the complete callback "
            "URL or just the authorization code.",
            InputErrorReason.MALFORMED_URL,
        ) from e

    if not parts.netloc:
        raise InputError(
            "Invalid URL format. Please provide either the complete callback "
            "URL or just the authorization code.",
            InputErrorReason.MALFORMED_URL,
        )

    # parse_qs decodes each value exactly once
    try:
        values = parse_qs(parts.query, errors="strict").get("code")
    except UnicodeDecodeError as e:
        raise InputError(
            "The callback URL contains invalid percent-encoded characters. "
            "Please copy the complete callback URL again.",
            InputErrorReason.MALFORMED_URL,
        ) from e

    if not values or not values[0]:
        raise InputError(
            'No "code" parameter found in the URL. Please ensure you copied '
            "the complete callback URL.",
            InputErrorReason.MISSING_CODE_PARAM,
        )

    logger.debug("Extracted authorization code from callback URL")
    return values[0]


def extract_code(raw_input: str) -> str:
    """
    Extract an authorization code from a callback URL or a bare code.

    Args:
        raw_input: Text the user pasted after authorizing.

    Returns:
        The decoded authorization code.

    Raises:
        InputError: If the input is empty, is an unparseable URL, or is a URL
            without a ``code`` query parameter.
    """
    trimmed = (raw_input or "").strip()
    if not trimmed:
        raise InputError("No authorization code provided.", InputErrorReason.EMPTY)

    if trimmed.startswith(URL_PREFIXES):
        return _code_from_url(trimmed)

    try:
        code = _decode_once(trimmed)
    except ValueError:
        logger.debug("Failed to decode input, using as-is")
        return trimmed

    logger.debug("Using input as authorization code directly")
    return code
