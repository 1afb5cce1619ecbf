from redirecthandler.utils.config import app_env, app_name, app_prefix, load_config, redis_config
from redirecthandler.utils.helpers import normalize_uri_path, uri_path_hash, utc_now, require_environment
from redirecthandler.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'redis_config',
    'normalize_uri_path',
    'uri_path_hash',
    'utc_now',
    'require_environment',
    'initialize_logging',
]
