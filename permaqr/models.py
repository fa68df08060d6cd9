import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from permaqr.constants import ErrorReason, Messages, QRConfig
from permaqr.exceptions import InvalidOptionsError


HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')
MIN_SIZE = 64
MAX_SIZE = 2048


# fmt: off
@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    url: str | None = None              # Accepted URL (trimmed), only when valid
    reason: ErrorReason | None = None   # Failure taxonomy entry, only when invalid
    error: str | None = None            # User-facing message for `reason`

    @classmethod
    def ok(cls, url: str) -> Self:
        return cls(is_valid=True, url=url)

    @classmethod
    def fail(cls, reason: ErrorReason) -> Self:
        return cls(is_valid=False, reason=reason, error=Messages.ERRORS[reason])
# fmt: on


class CarrierFormat(Enum):
    """How a token reached the preview endpoint."""

    PATH_COMPRESSED = 'path'
    QUERY_COMPRESSED = 'c'
    QUERY_BASE64 = 'd'
    QUERY_PERCENT_ENCODED = 'url'


@dataclass(frozen=True)
class TokenCarriers:
    """Every place a token may arrive in, as received.

    Example:
        >>> TokenCarriers(path='NoIgLg').present()
        (<CarrierFormat.PATH_COMPRESSED: 'path'>,)
    """

    path: str | None = None
    query_compressed: str | None = None
    query_base64: str | None = None
    query_percent: str | None = None

    def get(self, carrier: CarrierFormat) -> str | None:
        return {
            CarrierFormat.PATH_COMPRESSED: self.path,
            CarrierFormat.QUERY_COMPRESSED: self.query_compressed,
            CarrierFormat.QUERY_BASE64: self.query_base64,
            CarrierFormat.QUERY_PERCENT_ENCODED: self.query_percent,
        }[carrier]

    def present(self) -> tuple[CarrierFormat, ...]:
        # Empty strings count as absent
        return tuple(carrier for carrier in CarrierFormat if self.get(carrier))


@dataclass(frozen=True)
class QRCodeOptions:
    """Presentation settings for a rendered QR code.

    Attributes:
        foreground_color (str):
            Colour of dark modules as a hex string.
        background_color (str):
            Colour of light modules as a hex string.
        size (int):
            Target image width in pixels.
        error_correction_level (str):
            One of L, M, Q, H. Defaults to M.
        format (str):
            One of png, svg, jpeg.
        margin (int):
            Quiet zone width in modules.
    """

    foreground_color: str = QRConfig.DARK
    background_color: str = QRConfig.LIGHT
    size: int = QRConfig.WIDTH
    error_correction_level: str = QRConfig.ERROR_CORRECTION_LEVEL
    format: str = QRConfig.FORMAT
    margin: int = QRConfig.MARGIN

    def __post_init__(self) -> None:
        for name in ('foreground_color', 'background_color'):
            value = getattr(self, name)
            if not isinstance(value, str) or not HEX_COLOR.match(value):
                raise InvalidOptionsError(f'{name} must be a hex colour such as #2C3E50 (given value: {value!r})')
        if isinstance(self.size, bool) or not isinstance(self.size, int) or not MIN_SIZE <= self.size <= MAX_SIZE:
            raise InvalidOptionsError(f'size must be an integer between {MIN_SIZE} and {MAX_SIZE} (given value: {self.size!r})')
        if isinstance(self.margin, bool) or not isinstance(self.margin, int) or self.margin < 0:
            raise InvalidOptionsError(f'margin must be a non-negative integer (given value: {self.margin!r})')
        if self.error_correction_level not in QRConfig.ERROR_CORRECTION_LEVELS:
            raise InvalidOptionsError(f'error_correction_level must be one of L, M, Q, H (given value: {self.error_correction_level!r})')
        if self.format not in QRConfig.FORMATS:
            raise InvalidOptionsError(f'format must be one of png, svg, jpeg (given value: {self.format!r})')

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None, defaults: dict[str, Any] | None = None) -> Self:
        """Build options from a request payload laid over configured defaults.

        Both camelCase (as sent by browsers) and snake_case keys are accepted.
        Unknown keys are ignored.

        Raises:
            InvalidOptionsError: if the payload is not an object or a value is out of range.
        """
        aliases = {
            'foregroundColor': 'foreground_color',
            'backgroundColor': 'background_color',
            'errorCorrectionLevel': 'error_correction_level',
        }
        fields = set(cls.__dataclass_fields__)

        merged: dict[str, Any] = {}
        for source in (defaults or {}, data or {}):
            if not isinstance(source, dict):
                raise InvalidOptionsError(f'options must be a JSON object (given type: {type(source).__name__})')
            for key, value in source.items():
                key = aliases.get(key, key)
                if key in fields and value is not None:
                    merged[key] = value

        if isinstance(merged.get('error_correction_level'), str):
            merged['error_correction_level'] = merged['error_correction_level'].upper()
        if isinstance(merged.get('format'), str):
            merged['format'] = merged['format'].lower()
        return cls(**merged)


# fmt: off
@dataclass(frozen=True)
class GeneratedQRCode:
    target_url: str     # Validated destination URL
    preview_url: str    # Link embedded in the QR code
    image: bytes        # Rendered image data
    format: str         # png, svg or jpeg
    data_url: str       # `image` as a base64 data URL
# fmt: on
