"""HTML pages served by the preview endpoint

Every interpolated value is escaped. Pages are not meant to be indexed.
"""

import math
from html import escape

from permaqr.constants import ErrorReason
from permaqr.models import ValidationResult
from permaqr.validation import extract_domain, format_url_for_display
from permaqr.lambdas.preview.constants import ERROR_TITLES, UNSAFE_URL_TITLE


TITLE = 'Link Preview - Permanent QR Code Generator'

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta name="robots" content="noindex, nofollow">
<meta name="description" content="Preview and verify the destination before visiting">
{head}<title>{title}</title>
</head>
<body>
<main>
{content}
</main>
</body>
</html>
"""


def render_preview_page(url: str, redirect_delay_ms: int) -> str:
    """Preview card for a validated URL that redirects after `redirect_delay_ms`."""
    seconds = max(0, math.ceil(redirect_delay_ms / 1000))
    href = escape(url, quote=True)
    head = f'<meta http-equiv="refresh" content="{seconds};url={href}">\n'
    content = (
        '<section class="preview-card">\n'
        '<h1>You are being redirected</h1>\n'
        f'<p class="domain">{escape(extract_domain(url))}</p>\n'
        f'<p class="url" title="{href}">{escape(format_url_for_display(url))}</p>\n'
        f'<p>Redirecting in {seconds} seconds.</p>\n'
        f'<a class="continue" href="{href}" rel="noopener noreferrer">Continue to site</a>\n'
        '</section>'
    )
    return _LAYOUT.format(head=head, title=escape(TITLE), content=content)


def render_error_page(result: ValidationResult, home_url: str = '/') -> str:
    """Error card for a rejected preview request; never redirects."""
    title = error_title(result.reason)
    text = result.error or 'This URL failed security validation.'
    content = (
        '<section class="error-card">\n'
        f'<h1>{escape(title)}</h1>\n'
        f'<p>{escape(text)}</p>\n'
        f'<a class="home" href="{escape(home_url, quote=True)}">Go to Homepage</a>\n'
        '</section>'
    )
    return _LAYOUT.format(head='', title=escape(title), content=content)


def error_title(reason: ErrorReason | None) -> str:
    return ERROR_TITLES.get(reason, UNSAFE_URL_TITLE)
