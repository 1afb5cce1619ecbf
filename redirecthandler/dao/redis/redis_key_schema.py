import functools
from collections.abc import Callable

from redirecthandler.utils.constants import GLOBAL_HOST_KEY
from redirecthandler.utils.helpers import normalize_host


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


def host_segment(host: str | None) -> str:
    """Key segment for a host: the trimmed host, or '*' for global redirects."""
    return normalize_host(host) or GLOBAL_HOST_KEY


class RedisKeySchema:
    """Provide standardized Redis keys for storing redirects.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "redirecthandler:prod" or "redirecthandler:dev".

    Keys:
        redirects:<source hash>:<host>          -> hash with the redirect's columns (identity)
        redirects:targets:<target hash>:<host>  -> set of redirect keys pointing to a target
        redirects:index                         -> set of all redirect keys
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def redirect_key(self, source_uri_path_hash: str, host: str | None = None) -> str:
        return f'redirects:{source_uri_path_hash}:{host_segment(host)}'

    @prefix_key
    def target_index_key(self, target_uri_path_hash: str, host: str | None = None) -> str:
        return f'redirects:targets:{target_uri_path_hash}:{host_segment(host)}'

    @prefix_key
    def index_key(self) -> str:
        return 'redirects:index'
