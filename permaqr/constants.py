from enum import StrEnum


class URLValidation:
    """URL validation policy."""

    MAX_LENGTH = 500
    REQUIRED_PROTOCOLS = ('http://', 'https://')
    # Matched as case-insensitive substrings anywhere in the URL
    DANGEROUS_PROTOCOLS = ('javascript:', 'data:', 'file:', 'vbscript:')


class QRConfig:
    """Default QR code rendering settings."""

    ERROR_CORRECTION_LEVEL = 'M'
    ERROR_CORRECTION_LEVELS = ('L', 'M', 'Q', 'H')
    FORMAT = 'png'
    FORMATS = ('png', 'svg', 'jpeg')
    WIDTH = 256  # target image width in pixels
    MARGIN = 0  # quiet zone in modules
    DARK = '#2C3E50'
    LIGHT = '#FFFFFF'
    JPEG_QUALITY = 95


class RateLimit:
    """Generation rate limit (declared only, nothing enforces it)."""

    MAX_REQUESTS = 10
    WINDOW_MS = 60_000  # 1 minute


class Preview:
    """Preview page settings."""

    REDIRECT_DELAY_MS = 3_000


class Complexity:
    """Thresholds for QR density estimation (URL length in characters)."""

    LOW_BELOW = 100
    MEDIUM_BELOW = 300


class ErrorReason(StrEnum):
    """Stable failure taxonomy shared by validation, decoding and generation."""

    INVALID_URL = 'invalid URL'
    URL_TOO_LONG = 'URL too long'
    DANGEROUS_URL = 'dangerous URL'
    GENERATION_FAILED = 'generation failed'
    MALFORMED_TOKEN = 'malformed token'
    NO_TOKEN = 'no token'


class Messages:
    """User-facing strings."""

    ERRORS = {
        ErrorReason.INVALID_URL: 'Please enter a valid URL starting with http:// or https://',
        ErrorReason.URL_TOO_LONG: f'URL exceeds maximum length of {URLValidation.MAX_LENGTH} characters',
        ErrorReason.DANGEROUS_URL: 'This URL contains potentially dangerous content',
        ErrorReason.GENERATION_FAILED: 'Failed to generate QR code. Please try again.',
        ErrorReason.MALFORMED_TOKEN: 'The URL in this QR code is not properly encoded.',
        ErrorReason.NO_TOKEN: 'This QR code does not contain a valid URL.',
    }
    RATE_LIMIT = 'Rate limit reached. Please wait a moment.'
    GENERATED = 'QR code generated successfully'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        ORIGIN = 'PERMAQR_ORIGIN'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
