"""Unit tests for the legacy token decoders in legacy.py.

Test coverage includes:

1. decode_base64()
   - Padded, unpadded and form-decoded ('+' -> ' ') tokens.
   - Invalid alphabet, impossible lengths and excess padding raise MalformedTokenError.

2. decode_percent()
   - Strict decoding: malformed escapes and invalid UTF-8 raise MalformedTokenError.
"""

import base64

import pytest

from permaqr.encoding import decode_base64, decode_percent
from permaqr.exceptions import MalformedTokenError


# -------------------------------
# 1. decode_base64()
# -------------------------------


def test_decode_base64():
    assert decode_base64('aHR0cHM6Ly9hLmNvbQ==') == 'https://a.com'


def test_decode_base64_without_padding():
    assert decode_base64('aHR0cHM6Ly9hLmNvbQ') == 'https://a.com'


def test_decode_base64_ignores_ascii_whitespace():
    assert decode_base64('aHR0cHM6\nLy9hLmNvbQ==') == 'https://a.com'


def test_decode_base64_restores_plus_signs():
    raw = b'https://ab.com/\xfb\xef\xbe'
    token = base64.b64encode(raw).decode('ascii')
    assert '+' in token
    assert decode_base64(token.replace('+', ' ')) == raw.decode('latin-1')


def test_decode_base64_returns_binary_string():
    """Like atob(), every byte becomes exactly one character."""
    token = base64.b64encode('https://a.com/é'.encode('utf-8')).decode('ascii')
    assert decode_base64(token) == 'https://a.com/Ã©'


@pytest.mark.parametrize('token', ['aGk=', 'aGk', 'aGk\n='])
def test_decode_base64_accepts_at_most_the_needed_padding(token):
    assert decode_base64(token) == 'hi'


@pytest.mark.parametrize('token', ['aGk==', 'aGk===', 'aGk=====', 'aG=k', 'aGk=aGk=', '=aGk'])
def test_decode_base64_rejects_excess_or_misplaced_padding(token):
    with pytest.raises(MalformedTokenError):
        decode_base64(token)


@pytest.mark.parametrize('token', ['', None, '!!!!', 'aHR0c', 'aHR0cHM6Ly9hLmNvbQ==@@', '===='])
def test_decode_base64_rejects_malformed_tokens(token):
    with pytest.raises(MalformedTokenError):
        decode_base64(token)


# -------------------------------
# 2. decode_percent()
# -------------------------------


@pytest.mark.parametrize(
    'token, expected',
    [
        ('https%3A%2F%2Fa.com', 'https://a.com'),
        ('https://a.com', 'https://a.com'),
        ('https%3A%2F%2Fa.com%2F%3Fq%3D%E5%80%A4', 'https://a.com/?q=値'),
    ],
)
def test_decode_percent(token, expected):
    assert decode_percent(token) == expected


@pytest.mark.parametrize('token', ['', None, '100%', 'https%3A%2F%2Fa.com%2', '%zz', '%C3%28'])
def test_decode_percent_rejects_malformed_tokens(token):
    with pytest.raises(MalformedTokenError):
        decode_percent(token)
