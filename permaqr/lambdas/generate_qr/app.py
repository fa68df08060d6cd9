import json
import base64
import logging
import binascii

from permaqr.types import LambdaEvent, LambdaContext, LambdaResponse
from permaqr.constants import ErrorReason, Messages
from permaqr.exceptions import GenerationError, InvalidOptionsError
from permaqr.models import QRCodeOptions
from permaqr.rendering import generate_qr_code, estimate_qr_complexity, download_filename
from permaqr.validation import validate_input
from permaqr.utils import settings_for, public_origin
from permaqr.utils.helpers import guarantee_500_response
from permaqr.lambdas.generate_qr.constants import (
    INVALID_JSON_BODY,
    MISSING_URL,
    INVALID_OPTIONS,
    GENERATION_FAILED,
    GENERATE_SUCCESS,
    VALIDATION_ERROR_CODES,
)


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST',
}


def response_200(body: dict) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 400,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    body = {'message': message or 'Internal Server Error'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 500,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def _request_body(event: LambdaEvent) -> str:
    body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body, validate=True).decode('utf-8')
    return body


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to generate permanent QR codes

    This Lambda handler follows this procedure to generate QR codes:
    - Step 1: Extract the URL and options from the request body
    - Step 2: Validate the URL against the security policy
    - Step 3: Build the preview link (compressed token in the path)
    - Step 4: Render the QR code image
    - Step 5: Respond to user with 200 success

    HTTP responses:
        200: QR code generated
            message: success message
            target_url: validated original URL
            preview_url: link embedded in the QR code
            image: QR code image as a data URL
            format: png, svg or jpeg
            filename: suggested download file name
            complexity: how dense the QR code is ({level, description})
        400: Bad client request
            message: invalid JSON, missing url, invalid options or rejected URL
            errorCode: stable error code
        500: Internal server error
            message: QR code generation failed or unexpected error

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['preview_url']
        'http://localhost:3000/d/<token>'
    """
    # 0- Get Lambda settings (defaults when AppConfig is unavailable)
    settings = settings_for('generate_qr')

    # 1- Extract URL and options from request body
    try:
        request_body = json.loads(_request_body(event))
    except (json.JSONDecodeError, UnicodeDecodeError, binascii.Error):
        logger.info('Request body is not valid JSON. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        logger.info('Request body is not a JSON object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON_BODY)

    raw_url = request_body.get('url')
    if raw_url is None:
        logger.info("Missing 'url' in request body. Responding with 400.", extra={'event': MISSING_URL})
        return response_400(message="missing 'url' in JSON body", error_code=MISSING_URL)

    # 2- Validate the URL before it is ever encoded
    validation = validate_input(raw_url)
    if not validation.is_valid:
        error_code = VALIDATION_ERROR_CODES[validation.reason]
        logger.info(
            'URL rejected by input validation. Responding with 400.',
            extra={'event': error_code, 'reason': str(validation.reason)},
        )
        return response_400(message=validation.error, error_code=error_code)

    try:
        options = QRCodeOptions.from_dict(request_body.get('options'), defaults=settings.get('qr'))
    except InvalidOptionsError as e:
        logger.info('Invalid QR code options. Responding with 400.', extra={'event': INVALID_OPTIONS, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_OPTIONS)

    # 3-4- Build preview link and render the QR code
    origin = public_origin(event, settings.get('origin'))
    try:
        generated = generate_qr_code(validation.url, origin, options)
    except GenerationError:
        logger.exception('QR code generation failed. Responding with 500.', extra={'event': GENERATION_FAILED})
        return response_500(message=Messages.ERRORS[ErrorReason.GENERATION_FAILED], error_code=GENERATION_FAILED)

    # 5- Return successful response to user
    logger.info(
        'Generated QR code. Responding with 200.',
        extra={'event': GENERATE_SUCCESS, 'previewUrlLength': len(generated.preview_url), 'format': options.format},
    )
    return response_200(
        {
            'message': Messages.GENERATED,
            'target_url': generated.target_url,
            'preview_url': generated.preview_url,
            'image': generated.data_url,
            'format': generated.format,
            'filename': download_filename(generated.format),
            'complexity': estimate_qr_complexity(generated.preview_url),
        }
    )
