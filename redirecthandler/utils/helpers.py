"""Helper utilities shared by redirect models and DAOs.

Functions:
    normalize_uri_path(uri_path: str) -> str
        Strip leading and trailing slashes from a relative URI path
    uri_path_hash(uri_path: str) -> str
        Compute the fixed-width lookup hash of a normalized URI path
    normalize_host(host: str | None) -> str | None
        Trim a host name, treating blank hosts as global
    utc_now() -> datetime
        Default clock: current time in UTC
    as_utc(value: datetime | None) -> datetime | None
        Read naive datetimes as UTC so they compare with the clock
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from redirecthandler.utils.helpers import normalize_uri_path, uri_path_hash
    >>> normalize_uri_path('/blog/2025/hello-world/')
    'blog/2025/hello-world'
    >>> len(uri_path_hash('blog/2025/hello-world'))
    32
"""

import os
import hashlib
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from redirecthandler.exceptions import MissingEnvironmentVariableError


def normalize_uri_path(uri_path: str) -> str:
    """Strip every leading and trailing '/' from a URI path

    Args:
        uri_path (str): relative URI path, e.g. '/foo/bar/'

    Returns:
        str: normalized path, e.g. 'foo/bar'. '/' normalizes to ''.
    """
    return uri_path.strip('/')


def uri_path_hash(uri_path: str) -> str:
    """Compute the lookup hash of a URI path

    The hash is a 32 character hex MD5 digest. It only serves as a fixed-width
    index key for paths up to 4000 characters long, so MD5 is not used for
    security here.

    Args:
        uri_path (str): normalized URI path

    Returns:
        str: 32 character lowercase hex digest

    Example:
        >>> uri_path_hash('')
        'd41d8cd98f00b204e9800998ecf8427e'
    """
    return hashlib.md5(uri_path.encode('utf-8'), usedforsecurity=False).hexdigest()


def normalize_host(host: str | None) -> str | None:
    """Trim a host name, mapping None and blank hosts to None (global redirect)."""
    if host is None or host.strip() == '':
        return None
    return host.strip()


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive datetime, leaving aware datetimes and None as they are

    Example:
        >>> as_utc(datetime(2025, 10, 15, 12, 0))
        datetime.datetime(2025, 10, 15, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

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
