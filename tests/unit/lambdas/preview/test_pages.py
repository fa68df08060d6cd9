"""Unit tests for preview endpoint HTML in pages.py.

Test coverage includes:

1. render_preview_page()
   - Redirect delay rounding, escaping, truncated display URL.

2. render_error_page() and error_title()
   - Titles per failure reason, no redirect, escaped home link.
"""

import pytest

from permaqr.constants import ErrorReason
from permaqr.models import ValidationResult
from permaqr.lambdas.preview.pages import render_preview_page, render_error_page, error_title


# -------------------------------
# 1. render_preview_page()
# -------------------------------


@pytest.mark.parametrize('delay_ms, seconds', [(3000, 3), (2500, 3), (1, 1), (0, 0), (-500, 0)])
def test_render_preview_page_redirect_delay(delay_ms, seconds):
    html = render_preview_page('https://example.com', delay_ms)
    assert f'<meta http-equiv="refresh" content="{seconds};url=https://example.com">' in html
    assert f'Redirecting in {seconds} seconds.' in html


def test_render_preview_page_content():
    url = 'https://www.example.com/' + 'a' * 60
    html = render_preview_page(url, 3000)

    assert '<meta name="robots" content="noindex, nofollow">' in html
    assert '<p class="domain">www.example.com</p>' in html
    assert ('https://www.example.com/' + 'a' * 23 + '...') in html
    assert f'href="{url}"' in html
    assert 'Continue to site' in html


def test_render_preview_page_escapes_url():
    html = render_preview_page('https://example.com/?a=1&b="x"', 3000)
    assert 'url=https://example.com/?a=1&amp;b=&quot;x&quot;"' in html
    assert '&b="x"' not in html


# -------------------------------
# 2. render_error_page() and error_title()
# -------------------------------


@pytest.mark.parametrize(
    'reason, title',
    [
        (ErrorReason.NO_TOKEN, 'Invalid QR Code'),
        (ErrorReason.MALFORMED_TOKEN, 'Invalid URL Encoding'),
        (ErrorReason.INVALID_URL, 'Invalid or Unsafe URL'),
        (ErrorReason.URL_TOO_LONG, 'Invalid or Unsafe URL'),
        (ErrorReason.DANGEROUS_URL, 'Invalid or Unsafe URL'),
        (None, 'Invalid or Unsafe URL'),
    ],
)
def test_error_title(reason, title):
    assert error_title(reason) == title


def test_render_error_page():
    result = ValidationResult.fail(ErrorReason.DANGEROUS_URL)
    html = render_error_page(result, home_url='https://q.rs/?a=1&b=2')

    assert '<title>Invalid or Unsafe URL</title>' in html
    assert '<h1>Invalid or Unsafe URL</h1>' in html
    assert 'This URL contains potentially dangerous content' in html
    assert 'href="https://q.rs/?a=1&amp;b=2"' in html
    assert 'http-equiv="refresh"' not in html


def test_render_error_page_defaults_home_to_root():
    html = render_error_page(ValidationResult.fail(ErrorReason.NO_TOKEN))
    assert 'href="/"' in html
    assert 'Go to Homepage' in html
