"""QR code image rendering

Thin wrapper around `segno` (symbol encoding, PNG/SVG writers) and Pillow
(JPEG conversion). Nothing here knows about tokens: the renderer receives
the finished preview link and a set of QRCodeOptions.

Functions:
    render_qr_code(target: str, options: QRCodeOptions) -> bytes
        Render `target` as image bytes in the requested format.
    to_data_url(image: bytes, image_format: str) -> str
        Wrap image bytes in a base64 data URL.
    generate_qr_code(original: str, origin: str, options: QRCodeOptions) -> GeneratedQRCode
        Build the preview link for `original` and render it.
    estimate_qr_complexity(url: str) -> dict[str, str]
        Describe how dense the QR code for `url` will be.
    download_filename(image_format: str) -> str
        Date-stamped file name for a downloaded QR code.
"""

import io
import base64
import logging
from datetime import datetime, UTC

import segno
from beartype import beartype
from PIL import Image

from permaqr.constants import Complexity, QRConfig
from permaqr.exceptions import GenerationError
from permaqr.links import build_preview_link
from permaqr.models import GeneratedQRCode, QRCodeOptions


logger = logging.getLogger(__name__)

MIME_TYPES = {
    'png': 'image/png',
    'svg': 'image/svg+xml',
    'jpeg': 'image/jpeg',
}


@beartype
def render_qr_code(target: str, options: QRCodeOptions | None = None) -> bytes:
    """Render `target` as a QR code image.

    The module scale is the largest integer that keeps the image within
    `options.size` pixels (at least one pixel per module).

    Args:
        target (str):
            Text to encode, normally a preview link.
        options (QRCodeOptions, optional):
            Presentation settings. Defaults to QRCodeOptions().

    Returns:
        bytes: PNG, SVG or JPEG image data.

    Raises:
        GenerationError: if the symbol cannot be built (e.g. data too long
            for the error correction level) or written.
    """
    options = options or QRCodeOptions()

    try:
        qr = segno.make(target, error=options.error_correction_level, micro=False, boost_error=False)
    except (segno.DataOverflowError, ValueError) as e:
        raise GenerationError(f'Failed to encode QR symbol: {e}') from e

    width, _ = qr.symbol_size(scale=1, border=options.margin)
    scale = max(1, options.size // width)
    colors = {'dark': options.foreground_color, 'light': options.background_color}

    buffer = io.BytesIO()
    try:
        if options.format == 'svg':
            qr.save(buffer, kind='svg', scale=scale, border=options.margin, **colors)
        elif options.format == 'jpeg':
            png = io.BytesIO()
            qr.save(png, kind='png', scale=scale, border=options.margin, **colors)
            png.seek(0)
            with Image.open(png) as image:
                image.convert('RGB').save(buffer, format='JPEG', quality=QRConfig.JPEG_QUALITY)
        else:
            qr.save(buffer, kind='png', scale=scale, border=options.margin, **colors)
    except (OSError, ValueError) as e:
        raise GenerationError(f'Failed to write {options.format} image: {e}') from e

    logger.debug(
        'Rendered QR code.',
        extra={'version': qr.version, 'error': qr.error, 'scale': scale, 'format': options.format},
    )
    return buffer.getvalue()


@beartype
def to_data_url(image: bytes, image_format: str) -> str:
    return f'data:{MIME_TYPES[image_format]};base64,{base64.b64encode(image).decode("ascii")}'


@beartype
def generate_qr_code(original: str, origin: str, options: QRCodeOptions | None = None) -> GeneratedQRCode:
    """Build the preview link for a validated URL and render its QR code.

    Raises:
        GenerationError: if either the link or the image cannot be produced.
            No image is rendered when the link fails.
    """
    options = options or QRCodeOptions()
    preview_url = build_preview_link(original, origin)
    image = render_qr_code(preview_url, options)
    return GeneratedQRCode(
        target_url=original,
        preview_url=preview_url,
        image=image,
        format=options.format,
        data_url=to_data_url(image, options.format),
    )


def estimate_qr_complexity(url: str) -> dict[str, str]:
    """Describe how dense the QR code for a URL of this length will be.

    Example:
        >>> estimate_qr_complexity('https://example.com')['level']
        'low'
    """
    length = len(url)
    if length < Complexity.LOW_BELOW:
        return {'level': 'low', 'description': 'QR code will be easy to scan'}
    elif length < Complexity.MEDIUM_BELOW:
        return {'level': 'medium', 'description': 'QR code will be moderately dense'}
    else:
        return {'level': 'high', 'description': 'QR code will be very dense and may be difficult to scan'}


def download_filename(image_format: str = QRConfig.FORMAT) -> str:
    """Return 'qr-code-<YYYY-MM-DD>.<format>' for today's UTC date."""
    return f'qr-code-{datetime.now(UTC).date().isoformat()}.{image_format}'
