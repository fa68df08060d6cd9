"""Security policy for destination URLs

The same policy runs at both boundaries of a preview link's life:

    validate_input()    before a URL is ever encoded (generate endpoint)
    validate_preview()  after a token was decoded, before any redirect

A scanned QR code is untrusted input no matter who generated it, so the
preview boundary repeats the full input check rather than trusting the
generator.

Both functions are total: they never raise and always return a
ValidationResult.

Example:
    >>> validate_input('  https://example.com ').url
    'https://example.com'
    >>> validate_input('javascript:alert(1)').reason
    <ErrorReason.DANGEROUS_URL: 'dangerous URL'>
    >>> validate_input('ftp://example.com').reason
    <ErrorReason.INVALID_URL: 'invalid URL'>
    >>> validate_input('https://example.com/?next=javascript:alert(1)').reason
    <ErrorReason.DANGEROUS_URL: 'dangerous URL'>
"""

import logging
from urllib.parse import urlsplit, SplitResult

from permaqr.constants import URLValidation, ErrorReason
from permaqr.models import ValidationResult


logger = logging.getLogger(__name__)

# Code points that may not appear in a host (WHATWG forbidden host code points)
_FORBIDDEN_HOST_CHARS = frozenset(' \t\n\r#%/:<>?@[\\]^|')


def _utf16_length(text: str) -> int:
    # Browser string length: characters outside the BMP count twice
    return len(text.encode('utf-16-le', 'surrogatepass')) // 2


def _parse_url(candidate: str) -> SplitResult:
    """Parse a URL and require a scheme plus an authority with a host.

    Raises:
        ValueError: if the string is not a structurally valid http(s) URL.
    """
    parts = urlsplit(candidate)
    if parts.scheme.lower() not in {'http', 'https'}:
        raise ValueError(f'Bad scheme {parts.scheme!r}')
    if not parts.netloc:
        raise ValueError('Missing authority')

    host = parts.hostname
    if not host:
        raise ValueError('Missing host')
    # IPv6 literals keep their brackets in netloc; only check reg-names and IPv4
    if '[' not in parts.netloc and any(char in _FORBIDDEN_HOST_CHARS for char in host):
        raise ValueError(f'Forbidden character in host {host!r}')
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in candidate):
        raise ValueError('Control character in URL')

    parts.port  # raises ValueError on a non-numeric or out of range port
    return parts


def validate_input(raw: str) -> ValidationResult:
    """Validate a URL submitted for QR code generation.

    Checks run in order and the first failing one decides the reason:
        1. empty after trimming          -> invalid URL
        2. over 500 UTF-16 code units    -> URL too long
        3. denylisted marker anywhere    -> dangerous URL
        4. not http:// or https://       -> invalid URL
        5. not a structurally valid URL  -> invalid URL

    Args:
        raw (str): user supplied URL, possibly padded with whitespace.

    Returns:
        ValidationResult: valid results carry the trimmed URL.
    """
    if not isinstance(raw, str):
        return ValidationResult.fail(ErrorReason.INVALID_URL)

    url = raw.strip()
    if not url:
        return ValidationResult.fail(ErrorReason.INVALID_URL)

    # QR codes get very dense with long URLs
    if _utf16_length(url) > URLValidation.MAX_LENGTH:
        return ValidationResult.fail(ErrorReason.URL_TOO_LONG)

    lowered = url.lower()
    # Substring, not prefix: catches payloads smuggled in query strings or fragments.
    # Runs before the protocol check so a bare "javascript:" URL is reported as dangerous.
    if any(marker in lowered for marker in URLValidation.DANGEROUS_PROTOCOLS):
        return ValidationResult.fail(ErrorReason.DANGEROUS_URL)

    if not lowered.startswith(URLValidation.REQUIRED_PROTOCOLS):
        return ValidationResult.fail(ErrorReason.INVALID_URL)

    try:
        _parse_url(url)
    except ValueError:
        return ValidationResult.fail(ErrorReason.INVALID_URL)

    return ValidationResult.ok(url)


def validate_preview(decoded: str) -> ValidationResult:
    """Validate a URL decoded from a token, right before redirecting to it.

    Runs the complete `validate_input()` policy, then serialises the parsed
    URL and parses it again, rejecting values that do not survive the round
    trip unchanged.

    Args:
        decoded (str): output of any token decoder.

    Returns:
        ValidationResult
    """
    basic = validate_input(decoded)
    if not basic.is_valid:
        return basic

    try:
        parsed = _parse_url(basic.url)
        reparsed = _parse_url(parsed.geturl())
    except ValueError:
        logger.warning('Decoded URL passed input validation but failed to re-parse.')
        return ValidationResult.fail(ErrorReason.INVALID_URL)

    if reparsed != parsed:
        logger.warning('Decoded URL does not round-trip through the URL parser.')
        return ValidationResult.fail(ErrorReason.INVALID_URL)

    return ValidationResult.ok(basic.url)


def extract_domain(url: str) -> str:
    """Return the hostname of `url` for display, or `url` itself if unparsable."""
    try:
        return urlsplit(url).hostname or url
    except ValueError:
        return url


def format_url_for_display(url: str, max_length: int = 50) -> str:
    """Truncate `url` to `max_length` characters, ending in '...' when cut."""
    if len(url) <= max_length:
        return url
    return url[: max_length - 3] + '...'
