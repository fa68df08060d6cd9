"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "configs": {
            "generate_qr": {
                "origin": "https://q.rs",
                "qr": {"size": 256, "error_correction_level": "M", ...}
            },
            "preview": {
                "redirect_delay_ms": 3000,
                "home_url": "https://q.rs/"
            }
        }
    }

Each Lambda loads its own section (e.g., `"preview"`) from this AppConfig
document. Nothing in the document is required: `settings_for()` lays the
loaded section over DEFAULT_SETTINGS and falls back to the defaults when
AppConfig is unavailable, so tokens keep resolving during an AppConfig outage.

Typical usage inside a Lambda handler:
    >>> from permaqr.utils.config import settings_for
    >>> settings = settings_for('preview')
    >>> settings['redirect_delay_ms']
    3000
"""

import os
import json
import copy
import logging
import functools
import urllib.parse
import urllib.request
from collections.abc import Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from permaqr.types import LambdaConfiguration
from permaqr.constants import ENV, Preview
from permaqr.utils.helpers import require_environment
from permaqr.utils.runtime import running_locally
from permaqr.exceptions import AppConfigError, BadConfigurationError, ConfigurationError, InfrastructureError


logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, LambdaConfiguration] = {
    'generate_qr': {
        'origin': None,
        'qr': {},
    },
    'preview': {
        'redirect_delay_ms': Preview.REDIRECT_DELAY_MS,
        'home_url': '/',
    },
}


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def _lambda_section(document: dict, lambda_name: str) -> LambdaConfiguration:
    try:
        section = document['configs'][lambda_name]
    except (KeyError, TypeError) as e:
        raise AppConfigError(f"AppConfig document has no section for '{lambda_name}'") from e
    if not isinstance(section, dict):
        raise AppConfigError(f"AppConfig section for '{lambda_name}' is not an object")
    return section


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        try:
            with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
                document = json.load(r)
        except (OSError, json.JSONDecodeError) as e:
            raise AppConfigError(f'Failed to load AppConfig from local agent: {e}') from e

        data = _lambda_section(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'generate_qr', 'preview').

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Raises:
        MissingEnvironmentVariableError: if an AppConfig identifier is not set.
        AppConfigError: if AppConfig fails or returns a malformed document.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    try:
        appconfig = boto3.client('appconfigdata')

        # Start an AppConfig data session
        session_token = appconfig.start_configuration_session(
            ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
            EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
            ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
        )['InitialConfigurationToken']

        # Fetch the configuration
        response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
        content = response['Configuration'].read()
    except (BotoCoreError, ClientError) as e:
        raise AppConfigError(f'AppConfig request failed: {e}') from e

    try:
        document = json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AppConfigError('AppConfig returned a document that is not valid JSON') from e

    data = _lambda_section(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data


def settings_for(lambda_name: str) -> LambdaConfiguration:
    """Return the Lambda's settings: AppConfig section laid over DEFAULT_SETTINGS.

    Configuration and infrastructure errors are logged and answered with the
    defaults.
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS.get(lambda_name, {}))
    try:
        loaded = load_config(lambda_name)
    except (ConfigurationError, InfrastructureError) as e:
        logger.warning(
            'Falling back to default settings.',
            extra={'lambdaName': lambda_name, 'reason': str(e), 'error': e.__class__.__name__},
        )
        return settings

    settings.update(loaded)
    return settings
