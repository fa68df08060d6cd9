from permaqr.utils.config import app_env, app_name, load_config, settings_for
from permaqr.utils.helpers import base_url, public_origin, require_environment, guarantee_500_response
from permaqr.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'load_config',
    'settings_for',
    'base_url',
    'public_origin',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
