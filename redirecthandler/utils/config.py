"""Utility functions for application configuration management.

This module provides a standardized interface to access configuration data
stored in **AWS AppConfig**. Each environment (`APP_ENV`) has a dedicated
AppConfig *Environment* within the shared AppConfig *Application* identified
by `APP_NAME`. Configuration data is stored as a JSON document under a
configuration profile and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "redirect_store": {
                "redis": {"host": "...", "port": 6379, "db": 0}
            }
        }
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(section: str) -> dict
        Load the configuration section of the active backend from AWS AppConfig.

    redis_config(section: str) -> dict
        Translate the Redis configuration section into RedirectRedisDAO keyword arguments.

Example:
    Typical usage when building a DAO:

        >>> from redirecthandler.utils.config import redis_config, app_prefix
        >>> from redirecthandler.dao.redis import RedirectRedisDAO
        >>> dao = RedirectRedisDAO(**redis_config('redirect_store'), prefix=app_prefix())
"""

import os
import json
import logging

import boto3

from redirecthandler.types import AppConfig
from redirecthandler.exceptions import ConfigurationError
from redirecthandler.utils.helpers import require_environment
from redirecthandler.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
)


logger = logging.getLogger(__name__)

# RedirectRedisDAO accepts these Redis connection settings (as redis_<name>)
REDIS_SETTINGS = ('host', 'port', 'db', 'username', 'password')


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'redirecthandler'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'redirecthandler:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config(section: str) -> AppConfig:
    """Load configuration for a given section from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        section (str):
            Name of the configuration section (e.g., "redirect_store").

    Returns:
        dict: {<active backend>: <backend config of the section>}

    Raises:
        MissingEnvironmentVariableError:
            If an AppConfig identifier is not set.
        ConfigurationError:
            If the document has no config of the active backend for the section.
        botocore.exceptions.ClientError:
            If the AppConfig Data API calls fail.

    Example:
        >>> load_config('redirect_store')
        {'redis': {'host': 'redis.internal', 'port': 6379, 'db': 0}}
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'section': section})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    # Extract the active backend config for this section
    backend = config['active_backend']
    try:
        data = {backend: config['configs'][section][backend]}
    except KeyError as e:
        raise ConfigurationError(f"AppConfig has no '{backend}' configuration for section '{section}'.") from e

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'section': section, 'build': config.get('build')})
    return data


def redis_config(section: str) -> dict:
    """Return RedirectRedisDAO keyword arguments for a configuration section

    Raises:
        ConfigurationError:
            If the active backend of the section is not Redis.

    Example:
        >>> redis_config('redirect_store')
        {'redis_host': 'redis.internal', 'redis_port': 6379, 'redis_db': 0}
    """
    app_config = load_config(section)
    if 'redis' not in app_config:
        backend = next(iter(app_config))
        raise ConfigurationError(f"Section '{section}' uses the '{backend}' backend, expected 'redis'.")

    return {f'redis_{k}': v for k, v in app_config['redis'].items() if k in REDIS_SETTINGS}
