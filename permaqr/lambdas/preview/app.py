import logging

from permaqr.types import LambdaEvent, LambdaContext, LambdaResponse
from permaqr.models import CarrierFormat, TokenCarriers, ValidationResult
from permaqr.links import resolve
from permaqr.utils import settings_for
from permaqr.utils.helpers import guarantee_500_response
from permaqr.lambdas.preview.pages import render_preview_page, render_error_page
from permaqr.lambdas.preview.constants import (
    PREVIEW_SUCCESS,
    PREVIEW_REJECTED,
    ERROR_CODES,
    TOKEN_PATH_PARAM,
)


logger = logging.getLogger(__name__)

HTML_HEADERS = {
    'Content-Type': 'text/html; charset=utf-8',
    'X-Robots-Tag': 'noindex, nofollow',
    'Referrer-Policy': 'no-referrer',
}


def response_200(*, html: str) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': dict(HTML_HEADERS),
        'body': html,
    }


def response_400(*, html: str, error_code: str) -> LambdaResponse:
    return {
        'statusCode': 400,
        'headers': {**HTML_HEADERS, 'X-Error-Code': error_code},
        'body': html,
    }


def token_carriers(event: LambdaEvent) -> TokenCarriers:
    """Collect every token carrier of an API Gateway event.

    `/d/{token}` delivers the path carrier, `/v?c=&d=&url=` the query carriers.
    """
    path_parameters = event.get('pathParameters') or {}
    query = event.get('queryStringParameters') or {}
    return TokenCarriers(
        path=path_parameters.get(TOKEN_PATH_PARAM),
        query_compressed=query.get(CarrierFormat.QUERY_COMPRESSED.value),
        query_base64=query.get(CarrierFormat.QUERY_BASE64.value),
        query_percent=query.get(CarrierFormat.QUERY_PERCENT_ENCODED.value),
    )


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle scans of permanent QR codes

    This Lambda handler follows this procedure to serve preview pages:
    - Step 1: Collect token carriers from the path and query string
    - Step 2: Resolve the token (select carrier, decode, validate)
    - Step 3: Render the preview page (auto-redirect) or an error page

    HTTP responses:
        200: Preview page for a valid destination
            body: HTML page redirecting after the configured delay
        400: Rejected request
            body: HTML error page ("Invalid QR Code", "Invalid URL Encoding"
                  or "Invalid or Unsafe URL")
            headers:
                X-Error-Code: NO_TOKEN, MALFORMED_TOKEN, INVALID_URL,
                              URL_TOO_LONG or DANGEROUS_URL
        500: Internal server error

    Args:
        event (dict):
            API Gateway event for GET /d/{token} or GET /v.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'queryStringParameters': {'d': 'aHR0cHM6Ly9hLmNvbQ=='}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    # 0- Get Lambda settings (defaults when AppConfig is unavailable)
    settings = settings_for('preview')

    # 1- Collect token carriers
    carriers = token_carriers(event)

    # 2- Resolve token: select carrier, decode, validate
    result: ValidationResult = resolve(carriers)

    # 3- Render page; redirect only when the URL is valid
    if not result.is_valid:
        error_code = ERROR_CODES[result.reason]
        logger.info(
            'Preview request rejected. Responding with 400.',
            extra={'event': PREVIEW_REJECTED, 'errorCode': error_code, 'carriers': [c.value for c in carriers.present()]},
        )
        return response_400(html=render_error_page(result, home_url=settings['home_url']), error_code=error_code)

    logger.info('Serving preview page. Responding with 200.', extra={'event': PREVIEW_SUCCESS})
    return response_200(html=render_preview_page(result.url, settings['redirect_delay_ms']))
