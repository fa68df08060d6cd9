"""Compression codec for preview tokens

This module turns a URL into a compact, URL-safe token and back. The transform
is LZ-String's "encoded URI component" variant: LZW-style compression packed
into 6-bit symbols drawn from a URL-safe alphabet. Tokens produced here are
interchangeable with the ones issued by the browser generator, so QR codes
that are already printed keep resolving.

The alphabet is [A-Za-z0-9+-$]: every character may appear in a URL path
segment without further percent-encoding.

Functions:
    encode(original: str) -> str
        Compress a string into a token.
    decode(token: str) -> str
        Reverse `encode()`. Raises MalformedTokenError on bad input.
    compression_ratio(original: str) -> float
        Token length divided by original length.

Example:
    >>> from permaqr.encoding import encode, decode
    >>> token = encode('https://example.com')
    >>> decode(token)
    'https://example.com'
"""

from lzstring import LZString

from permaqr.exceptions import GenerationError, MalformedTokenError


URL_SAFE_ALPHABET = frozenset('ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+-$')

_lz = LZString()


def _to_utf16_units(text: str) -> str:
    # LZ-String works on UTF-16 code units; split astral characters into surrogate pairs
    if all(ord(char) <= 0xFFFF for char in text):
        return text
    data = text.encode('utf-16-le', 'surrogatepass')
    return ''.join(chr(int.from_bytes(data[i : i + 2], 'little')) for i in range(0, len(data), 2))


def _from_utf16_units(units: str) -> str:
    # Recombine surrogate pairs; a lone surrogate raises UnicodeDecodeError
    return units.encode('utf-16-le', 'surrogatepass').decode('utf-16-le')


def encode(original: str) -> str:
    """Compress a string into a URL-safe token.

    Args:
        original (str):
            String to compress (normally an already validated URL).

    Returns:
        str: deterministic token over the URL-safe alphabet.

    Raises:
        GenerationError: if the input is not a string or cannot be compressed.
    """
    if not isinstance(original, str):
        raise GenerationError(f'Only strings can be encoded (given type: {type(original)}).')

    try:
        return _lz.compressToEncodedURIComponent(_to_utf16_units(original))
    except (UnicodeError, KeyError, IndexError, TypeError, ValueError) as e:
        raise GenerationError(f'Failed to compress input: {e}') from e


def decode(token: str) -> str:
    """Decompress a token produced by `encode()`.

    Spaces are read back as '+', which form decoding of a query string
    turns them into.

    Args:
        token (str):
            Token taken from a path segment or the `c` query parameter.

    Returns:
        str: the original string.

    Raises:
        MalformedTokenError: if the token is empty, uses characters outside
            the alphabet, is truncated, or decompresses to nothing. No other
            exception escapes.
    """
    if not isinstance(token, str) or not token:
        raise MalformedTokenError('Token is empty.')

    try:
        units = _lz.decompressFromEncodedURIComponent(token.replace(' ', '+'))
    except Exception as e:
        # Corrupt input surfaces as KeyError, IndexError or UnboundLocalError inside lzstring
        raise MalformedTokenError(f'Failed to decompress token: {e.__class__.__name__}') from e

    if not units:
        raise MalformedTokenError('Token decompressed to an empty value.')

    try:
        return _from_utf16_units(units)
    except UnicodeError as e:
        raise MalformedTokenError('Token decompressed to invalid UTF-16.') from e


def compression_ratio(original: str) -> float:
    """Return len(token) / len(original); below 1.0 means the token is shorter."""
    if not original:
        return 1.0
    return len(encode(original)) / len(original)
