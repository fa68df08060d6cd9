"""Request and handler plumbing shared by the Lambdas.

Functions:
    base_url(event) -> str
        Public base URL of the API that received `event`
    public_origin(event, configured) -> str
        Origin preview links are built on
    require_environment(*names: str) -> Callable
        Decorator: fail fast when environment variables are missing
    guarantee_500_response(handler) -> Callable
        Decorator: never let an exception escape a Lambda handler

Example:
    Preview links minted behind the default execute-api domain keep the stage:

        >>> from permaqr.utils.helpers import public_origin
        >>> event = {'requestContext': {'domainName': 'abc123.execute-api.eu-west-1.amazonaws.com', 'stage': 'Prod'}}
        >>> public_origin(event)
        'https://abc123.execute-api.eu-west-1.amazonaws.com/Prod'
        >>> public_origin(event, configured='https://q.rs/')
        'https://q.rs'
"""

import os
import json
import logging
import functools
from collections.abc import Callable

from permaqr.types import LambdaEvent, LambdaContext, LambdaResponse
from permaqr.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from permaqr.exceptions import MissingEnvironmentVariableError
from permaqr.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_BASE_URL = 'http://localhost:3000'

# HTTP APIs serve the `$default` stage without a path prefix
_UNPREFIXED_STAGES = frozenset({'', '$default'})


def base_url(event: LambdaEvent) -> str:
    """Public base URL of the API Gateway endpoint that received `event`.

    Custom domains map stages through base path mappings, so the stage is
    only appended for execute-api domains. Events without a domain come from
    SAM local or tests.

    Args:
        event (dict): REST or HTTP API Gateway event

    Returns:
        str: e.g. 'https://q.rs' or 'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName')
    if not domain:
        return LOCAL_BASE_URL

    stage = request_context.get('stage') or ''
    if 'execute-api' not in domain or stage in _UNPREFIXED_STAGES:
        return f'https://{domain}'
    return f'https://{domain}/{stage}'


def public_origin(event: LambdaEvent, configured: str | None = None) -> str:
    """Return the origin preview links are built on.

    Precedence: configured origin (AppConfig) > PERMAQR_ORIGIN > API Gateway event.
    """
    origin = configured or os.environ.get(ENV.App.ORIGIN) or base_url(event)
    return origin.rstrip('/')


def require_environment(*names: str) -> Callable:
    """Decorator: raise MissingEnvironmentVariableError unless every variable in `names` is set and non-empty."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with HTTP 500 instead of crashing the Lambda.

    Any exception escaping `handler` is logged and converted into a JSON 500
    response. When running locally the exception is re-raised so it shows up
    in the SAM console.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
