"""Helpers for storing RedirectModel instances in Redis hashes

Every column of a redirect is stored as a string field of one Redis hash:
    - str               -> as-is
    - int               -> decimal string
    - datetime          -> ISO 8601 string
    - None              -> '' (Redis can't store nulls)

Functions:
    connection_label(client: redis.Redis) -> str
        Render a client's connection as host:port/db
    handle_redis_connection_error(method) -> method
        Decorator: translate Redis connection errors into DataStoreError
    serialize_redirect(redirect: RedirectModel) -> RedirectHash
        Encode all columns of a redirect
    serialize_redirect_content(redirect: RedirectModel) -> RedirectHash
        Encode only the columns an update may change
    deserialize_redirect(data: RedirectHash) -> RedirectModel
        Decode a Redis hash into a RedirectModel
    is_complete(data: RedirectHash | None) -> bool
        Check a hash holds a full redirect, not a leftover of a late hit
    check_uri_path_lengths(redirect: RedirectModel) -> None
        Reject paths wider than their persisted columns
"""

import functools
import redis
from datetime import datetime
from typing import TypeVar, Any
from collections.abc import Callable

from redirecthandler.types import RedirectHash
from redirecthandler.models import RedirectModel
from redirecthandler.exceptions import InvalidUriPathError
from redirecthandler.dao.exceptions import DataStoreError
from redirecthandler.utils.constants import MAX_SOURCE_URI_PATH_LENGTH, MAX_TARGET_URI_PATH_LENGTH


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])

# Columns changed by RedirectModel.update() / set_target_uri_path() / set_status_code()
CONTENT_FIELDS = (
    'target_uri_path',
    'target_uri_path_hash',
    'status_code',
    'last_modification_date_time',
)


def connection_label(client: redis.Redis) -> str:
    """Render the connection of a Redis client as host:port/db, e.g. 'localhost:6379/0'"""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_redirect(self, key):
        ...     return self.redis.hgetall(key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}.") from e

    return wrapper


def _encode_datetime(value: datetime | None) -> str:
    return '' if value is None else value.isoformat()


def _decode_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _decode_optional(value: str | None) -> str | None:
    return value if value else None


def serialize_redirect(redirect: RedirectModel) -> RedirectHash:
    """Encode every column of a redirect as a Redis hash mapping"""
    return {
        'source_uri_path': redirect.source_uri_path,
        'source_uri_path_hash': redirect.source_uri_path_hash,
        'target_uri_path': redirect.target_uri_path,
        'target_uri_path_hash': redirect.target_uri_path_hash,
        'host': redirect.host or '',
        'status_code': str(redirect.status_code),
        'hit_counter': str(redirect.hit_counter),
        'last_hit': _encode_datetime(redirect.last_hit),
        'creator': redirect.creator or '',
        'comment': redirect.comment or '',
        'type': redirect.type.value,
        'start_date_time': _encode_datetime(redirect.start_date_time),
        'end_date_time': _encode_datetime(redirect.end_date_time),
        'creation_date_time': _encode_datetime(redirect.creation_date_time),
        'last_modification_date_time': _encode_datetime(redirect.last_modification_date_time),
        'version': str(redirect.version),
    }


def serialize_redirect_content(redirect: RedirectModel) -> RedirectHash:
    """Encode only the content columns of a redirect

    Hit telemetry is left out so an update never overwrites hits recorded
    concurrently via HINCRBY.
    """
    data = serialize_redirect(redirect)
    return {field: data[field] for field in CONTENT_FIELDS}


def deserialize_redirect(data: RedirectHash) -> RedirectModel:
    """Decode a Redis hash (decoded responses) into a RedirectModel

    Raises:
        KeyError: if a required column is missing.
    """
    return RedirectModel.restore(
        source_uri_path=data['source_uri_path'],
        target_uri_path=data['target_uri_path'],
        status_code=int(data['status_code']),
        host=_decode_optional(data.get('host')),
        creator=_decode_optional(data.get('creator')),
        comment=_decode_optional(data.get('comment')),
        type=_decode_optional(data.get('type')),
        start_date_time=_decode_datetime(data.get('start_date_time')),
        end_date_time=_decode_datetime(data.get('end_date_time')),
        hit_counter=int(data.get('hit_counter') or 0),
        last_hit=_decode_datetime(data.get('last_hit')),
        creation_date_time=_decode_datetime(data['creation_date_time']),
        last_modification_date_time=_decode_datetime(data['last_modification_date_time']),
        version=int(data.get('version') or 0),
    )


def is_complete(data: RedirectHash | None) -> bool:
    """Check a Redis hash holds a full redirect, not only hit telemetry"""
    return bool(data) and 'source_uri_path' in data


def check_uri_path_lengths(redirect: RedirectModel) -> None:
    """Reject paths that don't fit the persisted columns

    Raises:
        InvalidUriPathError:
            If the source path exceeds 4000 characters or the target path exceeds 500 characters.
    """
    if len(redirect.source_uri_path) > MAX_SOURCE_URI_PATH_LENGTH:
        raise InvalidUriPathError(
            f'Source URI path exceeds {MAX_SOURCE_URI_PATH_LENGTH} characters (given: {len(redirect.source_uri_path)}).'
        )
    if len(redirect.target_uri_path) > MAX_TARGET_URI_PATH_LENGTH:
        raise InvalidUriPathError(
            f'Target URI path exceeds {MAX_TARGET_URI_PATH_LENGTH} characters (given: {len(redirect.target_uri_path)}).'
        )
