"""Data Access Object (DAO) implementation for managing redirects in Redis

This module provides a Redis-based implementation of RedirectBaseDAO for CRUD-like
operations with RedirectModel instances.

Responsibilities:
    - Insert, retrieve, update and delete redirects in Redis;
    - Enforce the (source_uri_path_hash, host) identity on insert;
    - Enforce optimistic locking on update via WATCH/MULTI and the record version;
    - Maintain the target index used to find redirects pointing to a path;
    - Track redirect hits without touching the record version;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    RedirectRedisDAO:
        DAO for storing and retrieving RedirectModel in a Redis datastore.

Example:
    >>> from redirecthandler.models import RedirectModel
    >>> from redirecthandler.dao.redis import RedirectRedisDAO

    >>> dao = RedirectRedisDAO(prefix="redirecthandler:dev")

    >>> redirect = RedirectModel('/old', '/new', 301, host='example.com')
    >>> dao.insert(redirect)
    <RedirectRedisDAO>

    >>> retrieved = dao.get('old', host='example.com')
    >>> retrieved.target_uri_path
    'new'
    >>> retrieved.version
    1

    >>> dao.hit('old', host='example.com')
    1
"""

import logging

import redis
from beartype import beartype

from redirecthandler.types import Clock
from redirecthandler.models import RedirectModel, RedirectType
from redirecthandler.dao.base import RedirectBaseDAO
from redirecthandler.dao.redis.mixins import RedisClientMixin
from redirecthandler.dao.redis.helpers import (
    handle_redis_connection_error,
    serialize_redirect,
    serialize_redirect_content,
    deserialize_redirect,
    check_uri_path_lengths,
    is_complete,
)
from redirecthandler.dao.exceptions import RedirectAlreadyExistsError, RedirectConflictError, RedirectNotFoundError
from redirecthandler.utils.helpers import normalize_uri_path, uri_path_hash, normalize_host, utc_now, as_utc


logger = logging.getLogger(__name__)


class RedirectRedisDAO(RedisClientMixin, RedirectBaseDAO):
    """Redis-based Data Access Object (DAO) for managing redirects

    This class implements the RedirectBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(redirect: RedirectModel, **kwargs) -> RedirectRedisDAO:
            Insert a redirect and add it to the target index.
            Raises RedirectAlreadyExistsError when the identity is taken.

        get(source_uri_path: str, host: str | None, fallback: bool, **kwargs) -> RedirectModel:
            Retrieve a redirect by source path and host.
            Raises RedirectNotFoundError when no redirect matches.

        update(redirect: RedirectModel, **kwargs) -> RedirectRedisDAO:
            Persist content changes of a redirect, bumping its version.
            Raises RedirectConflictError on stale versions.

        hit(source_uri_path: str, host: str | None, **kwargs) -> int:
            Increment the hit counter of a redirect.

        delete(source_uri_path: str, host: str | None, **kwargs) -> RedirectRedisDAO:
            Remove a redirect and its index entries.

        find_by_target(target_uri_path: str, host: str | None, **kwargs) -> list[RedirectModel]:
            List redirects pointing to a target path.

        find_all(host, only_active, redirect_type, **kwargs) -> list[RedirectModel]:
            List all redirects, optionally filtered.

        hosts(**kwargs) -> list[str]:
            List distinct hosts.

        delete_by_host(host: str | None, **kwargs) -> int:
            Remove all redirects of a host.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, redirect: RedirectModel, **kwargs) -> 'RedirectRedisDAO':
        """Insert a redirect into Redis

        The identity key is WATCHed so two concurrent inserts of the same
        (source_uri_path_hash, host) can't both succeed. The redirect hash and
        its index entries are written in one MULTI/EXEC transaction.

        Args:
            redirect (RedirectModel):
                Redirect to insert. Its version is set to 1 on success.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            RedirectRedisDAO: self (for method chaining)

        Raises:
            RedirectAlreadyExistsError:
                If a redirect with the same identity already exists.
            InvalidUriPathError:
                If a path doesn't fit its persisted column.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        check_uri_path_lengths(redirect)

        redirect_key = self.keys.redirect_key(redirect.source_uri_path_hash, redirect.host)
        target_index_key = self.keys.target_index_key(redirect.target_uri_path_hash, redirect.host)
        already_exists = RedirectAlreadyExistsError(
            f"Redirect for '{redirect.source_uri_path}' (host: {redirect.host}) already exists."
        )

        mapping = serialize_redirect(redirect)
        mapping['version'] = '1'

        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(redirect_key)
                if pipe.hexists(redirect_key, 'source_uri_path'):
                    raise already_exists

                pipe.multi()
                pipe.hset(redirect_key, mapping=mapping)
                pipe.sadd(target_index_key, redirect_key)
                pipe.sadd(self.keys.index_key(), redirect_key)
                pipe.execute()
            except redis.exceptions.WatchError as e:
                # Another client wrote the same identity between WATCH and EXEC
                raise already_exists from e

        redirect.version = 1
        logger.debug(
            'Inserted redirect.',
            extra={'sourceUriPath': redirect.source_uri_path, 'targetUriPath': redirect.target_uri_path, 'host': redirect.host},
        )
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, source_uri_path: str, host: str | None = None, fallback: bool = True, **kwargs) -> RedirectModel:
        """Retrieve a redirect by source path and host

        Args:
            source_uri_path (str):
                Source URI path, normalized before lookup.
            host (str | None):
                Host the redirect is scoped to. None (or blank) looks up the global redirect.
            fallback (bool):
                If True, fall back to the global redirect when no host-scoped one exists.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            RedirectModel: The stored redirect.

        Raises:
            RedirectNotFoundError:
                If no matching redirect exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('/old/', host='example.com')
            RedirectModel(source_uri_path='old', target_uri_path='new', status_code=301, host='example.com')
        """
        path = normalize_uri_path(source_uri_path)
        path_hash = uri_path_hash(path)
        host = normalize_host(host)

        candidates = [host]
        if fallback and host is not None:
            candidates.append(None)

        for candidate in candidates:
            data = self.redis.hgetall(self.keys.redirect_key(path_hash, candidate))
            if is_complete(data):
                return deserialize_redirect(data)

        raise RedirectNotFoundError(f"Redirect for '{path}' (host: {host}) not found.")

    @handle_redis_connection_error
    @beartype
    def update(self, redirect: RedirectModel, **kwargs) -> 'RedirectRedisDAO':
        """Persist content changes of a stored redirect

        Only content columns (target path and hash, status code, modification
        time) and the version are written. Hit telemetry is left alone.

        Steps:
            - WATCH the redirect key and read the stored version and target hash
            - Reject the write if the stored version differs from redirect.version
            - MULTI: write content columns with version + 1, move the redirect
              between target index sets if the target changed
            - EXEC: a WatchError means another client modified the redirect meanwhile

        Args:
            redirect (RedirectModel):
                Redirect previously read from or inserted into this data store.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            RedirectRedisDAO: self (for method chaining)

        Raises:
            RedirectNotFoundError:
                If the redirect is not stored.
            RedirectConflictError:
                If the stored version differs from redirect.version,
                or the redirect was modified during the transaction.
            InvalidUriPathError:
                If the target path doesn't fit its persisted column.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        check_uri_path_lengths(redirect)

        redirect_key = self.keys.redirect_key(redirect.source_uri_path_hash, redirect.host)
        new_version = redirect.version + 1

        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(redirect_key)
                stored_version, stored_target_hash = pipe.hmget(redirect_key, ['version', 'target_uri_path_hash'])
                if stored_version is None:
                    raise RedirectNotFoundError(f"Redirect for '{redirect.source_uri_path}' (host: {redirect.host}) not found.")
                if int(stored_version) != redirect.version:
                    logger.info(
                        'Rejected update of redirect based on a stale version.',
                        extra={'sourceUriPath': redirect.source_uri_path, 'host': redirect.host, 'storedVersion': int(stored_version), 'version': redirect.version},
                    )
                    raise RedirectConflictError(
                        f"Redirect for '{redirect.source_uri_path}' (host: {redirect.host}) was modified "
                        f'(stored version: {stored_version}, given version: {redirect.version}).'
                    )

                pipe.multi()
                pipe.hset(redirect_key, mapping={**serialize_redirect_content(redirect), 'version': str(new_version)})
                if stored_target_hash != redirect.target_uri_path_hash:
                    pipe.srem(self.keys.target_index_key(stored_target_hash, redirect.host), redirect_key)
                    pipe.sadd(self.keys.target_index_key(redirect.target_uri_path_hash, redirect.host), redirect_key)
                pipe.execute()
            except redis.exceptions.WatchError as e:
                raise RedirectConflictError(
                    f"Redirect for '{redirect.source_uri_path}' (host: {redirect.host}) was modified concurrently."
                ) from e

        redirect.version = new_version
        logger.debug(
            'Updated redirect.',
            extra={'sourceUriPath': redirect.source_uri_path, 'host': redirect.host, 'version': new_version},
        )
        return self

    @handle_redis_connection_error
    @beartype
    def hit(self, source_uri_path: str, host: str | None = None, *, clock: Clock = utc_now, **kwargs) -> int:
        """Increment the hit counter of a redirect and set its last hit time

        NOTE: hits are telemetry, so neither the version nor the modification
              time change. Concurrent hits never conflict with each other or
              with updates.
        NOTE: the existence check and the increment are not atomic. If the
              redirect is deleted in between, HINCRBY leaves a partial hash
              without identity columns behind. Reads and further hits ignore such
              hashes and the next insert of that identity overwrites it.

        Args:
            source_uri_path (str):
                Source URI path, normalized before lookup.
            host (str | None):
                Exact host of the redirect (no global fallback).
            clock (Clock):
                Source of the last hit timestamp.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            int: The hit counter after incrementing.

        Raises:
            RedirectNotFoundError:
                If the redirect is not stored.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.hit('old', host='example.com')
            42
        """
        path = normalize_uri_path(source_uri_path)
        redirect_key = self.keys.redirect_key(uri_path_hash(path), host)

        # a leftover hash holding only hit telemetry is not a redirect
        if not self.redis.hexists(redirect_key, 'source_uri_path'):
            raise RedirectNotFoundError(f"Redirect for '{path}' (host: {normalize_host(host)}) not found.")

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hincrby(redirect_key, 'hit_counter', 1)
            pipe.hset(redirect_key, 'last_hit', as_utc(clock()).isoformat())
            hit_counter, _ = pipe.execute()

        return int(hit_counter)

    @handle_redis_connection_error
    @beartype
    def delete(self, source_uri_path: str, host: str | None = None, **kwargs) -> 'RedirectRedisDAO':
        """Remove a redirect and its index entries

        Raises:
            RedirectNotFoundError:
                If the redirect is not stored.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        path = normalize_uri_path(source_uri_path)
        redirect_key = self.keys.redirect_key(uri_path_hash(path), host)

        target_hash = self.redis.hget(redirect_key, 'target_uri_path_hash')
        if target_hash is None:
            raise RedirectNotFoundError(f"Redirect for '{path}' (host: {normalize_host(host)}) not found.")

        with self.redis.pipeline(transaction=True) as pipe:
            self._remove(pipe, redirect_key, target_hash, host)
            pipe.execute()

        logger.info('Deleted redirect.', extra={'sourceUriPath': path, 'host': normalize_host(host)})
        return self

    @handle_redis_connection_error
    @beartype
    def find_by_target(self, target_uri_path: str, host: str | None = None, **kwargs) -> list[RedirectModel]:
        """Retrieve all redirects pointing to a target path on a host

        Example:
            >>> dao.find_by_target('/new', host='example.com')
            [RedirectModel(source_uri_path='old', target_uri_path='new', status_code=301, host='example.com')]
        """
        path_hash = uri_path_hash(normalize_uri_path(target_uri_path))
        redirect_keys = self.redis.smembers(self.keys.target_index_key(path_hash, host))
        return sorted(self._load(redirect_keys), key=lambda r: r.source_uri_path)

    @handle_redis_connection_error
    @beartype
    def find_all(
        self,
        host: str | None = None,
        only_active: bool = False,
        redirect_type: RedirectType | None = None,
        *,
        clock: Clock = utc_now,
        **kwargs,
    ) -> list[RedirectModel]:
        """Retrieve all redirects sorted by host (global first) and source path

        Args:
            host (str | None):
                Only return redirects scoped to this host. None disables the filter.
            only_active (bool):
                Only return redirects whose validity window contains clock().
            redirect_type (RedirectType | None):
                Only return redirects of this type.
            clock (Clock):
                Source of "now" for the validity window check.
        """
        redirects = self._load(self.redis.smembers(self.keys.index_key()))

        host = normalize_host(host)
        if host is not None:
            redirects = [r for r in redirects if r.host == host]
        if redirect_type is not None:
            redirects = [r for r in redirects if r.type == redirect_type]
        if only_active:
            now = clock()
            redirects = [r for r in redirects if r.is_active(now)]

        return sorted(redirects, key=lambda r: (r.host or '', r.source_uri_path))

    @handle_redis_connection_error
    def hosts(self, **kwargs) -> list[str]:
        """Retrieve the sorted distinct hosts of all host-scoped redirects

        Example:
            >>> dao.hosts()
            ['example.com', 'example.org']
        """
        redirects = self._load(self.redis.smembers(self.keys.index_key()))
        return sorted({r.host for r in redirects if r.host is not None})

    @handle_redis_connection_error
    @beartype
    def delete_by_host(self, host: str | None, **kwargs) -> int:
        """Remove every redirect scoped to host (None: every global redirect)

        Returns:
            int: Number of removed redirects.
        """
        host = normalize_host(host)
        redirects = [r for r in self._load(self.redis.smembers(self.keys.index_key())) if r.host == host]
        if not redirects:
            return 0

        with self.redis.pipeline(transaction=True) as pipe:
            for redirect in redirects:
                redirect_key = self.keys.redirect_key(redirect.source_uri_path_hash, host)
                self._remove(pipe, redirect_key, redirect.target_uri_path_hash, host)
            pipe.execute()

        logger.info('Deleted redirects of host.', extra={'host': host, 'count': len(redirects)})
        return len(redirects)

    def _remove(self, pipe: redis.client.Pipeline, redirect_key: str, target_hash: str, host: str | None) -> None:
        pipe.delete(redirect_key)
        pipe.srem(self.keys.target_index_key(target_hash, host), redirect_key)
        pipe.srem(self.keys.index_key(), redirect_key)

    def _load(self, redirect_keys) -> list[RedirectModel]:
        """Fetch and decode redirects in one round trip, skipping keys deleted meanwhile"""
        redirect_keys = sorted(redirect_keys)
        if not redirect_keys:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for redirect_key in redirect_keys:
                pipe.hgetall(redirect_key)
            rows = pipe.execute()

        return [deserialize_redirect(row) for row in rows if is_complete(row)]
