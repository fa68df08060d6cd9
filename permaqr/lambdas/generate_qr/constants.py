from permaqr.constants import ErrorReason


# Logging events / error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_URL = 'MISSING_URL'
INVALID_OPTIONS = 'INVALID_OPTIONS'
GENERATION_FAILED = 'GENERATION_FAILED'
GENERATE_SUCCESS = 'GENERATE_SUCCESS'

VALIDATION_ERROR_CODES = {
    ErrorReason.INVALID_URL: 'INVALID_URL',
    ErrorReason.URL_TOO_LONG: 'URL_TOO_LONG',
    ErrorReason.DANGEROUS_URL: 'DANGEROUS_URL',
}
