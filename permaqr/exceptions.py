class PermaQRError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:permaqr_error'


class TokenError(PermaQRError):
    """Base exception for all token carrier errors."""

    error_code = 'token:token_error'


class DecodeError(TokenError):
    """Raised when a token cannot be reversed to a string."""

    error_code = 'token:decode_error'


class MalformedTokenError(DecodeError):
    """Raised when a token is corrupt, truncated or uses the wrong alphabet."""

    error_code = 'token:malformed_token'


class GenerationError(PermaQRError):
    """Raised when a preview link or QR image cannot be generated."""

    error_code = 'generate:generation_failed'


class InvalidOptionsError(PermaQRError):
    """Raised when QR code options are out of range or of the wrong type."""

    error_code = 'generate:invalid_options'


class ConfigurationError(PermaQRError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class InfrastructureError(PermaQRError):
    """Base exception for all infrastructure (AWS) errors."""

    error_code = 'infra:infrastructure_error'


class AppConfigError(InfrastructureError):
    """Raised when AppConfig responds with erroneous data."""

    error_code = 'infra:appconfig_error'
