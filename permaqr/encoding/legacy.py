"""Decoders for token formats issued before compressed tokens existed

Two generations of preview links are still in circulation:

    /v?d=<base64>   base64 of the URL (decoded like a browser's atob())
    /v?url=<pct>    the URL percent-encoded once more

Both decoders are pure and raise MalformedTokenError on bad input.
"""

import re
import base64
import binascii
from urllib.parse import unquote

from permaqr.exceptions import MalformedTokenError


_ASCII_WHITESPACE = re.compile(r'[\t\n\f\r]')
_BAD_PERCENT_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def decode_base64(token: str) -> str:
    """Decode a legacy base64 token.

    Mirrors atob(): ASCII whitespace is ignored, missing padding is tolerated
    but excess or misplaced '=' is not, and each decoded byte becomes one
    character (latin-1). Spaces are read as '+' since form decoding of the
    query string produces them.

    Example:
        >>> decode_base64('aHR0cHM6Ly9hLmNvbQ==')
        'https://a.com'
    """
    if not isinstance(token, str) or not token:
        raise MalformedTokenError('Token is empty.')

    compact = _ASCII_WHITESPACE.sub('', token.replace(' ', '+'))
    # Padding is only recognised on a full final quantum, at most two characters
    if len(compact) % 4 == 0:
        compact = compact.removesuffix('==') if compact.endswith('==') else compact.removesuffix('=')
    if not compact or len(compact) % 4 == 1:
        raise MalformedTokenError('Base64 token has an impossible length.')
    if '=' in compact:
        raise MalformedTokenError('Base64 token has misplaced padding.')

    padded = compact + '=' * (-len(compact) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f'Invalid base64 token: {e}') from e
    return raw.decode('latin-1')


def decode_percent(token: str) -> str:
    """Decode a legacy percent-encoded token.

    Strict like decodeURIComponent(): a '%' not followed by two hex digits
    or escapes that do not form valid UTF-8 are rejected.

    Example:
        >>> decode_percent('https%3A%2F%2Fa.com')
        'https://a.com'
    """
    if not isinstance(token, str) or not token:
        raise MalformedTokenError('Token is empty.')
    if _BAD_PERCENT_ESCAPE.search(token):
        raise MalformedTokenError('Token contains a malformed percent escape.')

    try:
        return unquote(token, encoding='utf-8', errors='strict')
    except UnicodeDecodeError as e:
        raise MalformedTokenError('Percent escapes do not form valid UTF-8.') from e
