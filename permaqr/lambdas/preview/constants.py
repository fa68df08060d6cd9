from permaqr.constants import ErrorReason


# Logging events
PREVIEW_SUCCESS = 'PREVIEW_SUCCESS'
PREVIEW_REJECTED = 'PREVIEW_REJECTED'

ERROR_CODES = {
    ErrorReason.NO_TOKEN: 'NO_TOKEN',
    ErrorReason.MALFORMED_TOKEN: 'MALFORMED_TOKEN',
    ErrorReason.INVALID_URL: 'INVALID_URL',
    ErrorReason.URL_TOO_LONG: 'URL_TOO_LONG',
    ErrorReason.DANGEROUS_URL: 'DANGEROUS_URL',
}

ERROR_TITLES = {
    ErrorReason.NO_TOKEN: 'Invalid QR Code',
    ErrorReason.MALFORMED_TOKEN: 'Invalid URL Encoding',
}
UNSAFE_URL_TITLE = 'Invalid or Unsafe URL'

# Path parameter name of the /d/{token} endpoint
TOKEN_PATH_PARAM = 'token'
