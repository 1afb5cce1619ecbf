"""Connection handling shared by Redis-backed redirect DAOs

RedisClientMixin owns the Redis client and the key schema of a DAO. The client
always decodes responses, because redirects are rebuilt from str hash fields.

Example:
    Building a DAO from the 'redirect_store' AppConfig section, namespaced
    with the application prefix (APP_NAME:APP_ENV):

        >>> dao = RedirectRedisDAO.from_config('redirect_store')
        >>> dao.keys.index_key()
        'redirecthandler:prod:redirects:index'

    Or from explicit connection parameters:

        >>> dao = RedirectRedisDAO(redis_host='localhost', prefix='redirecthandler:local')
"""

import logging
from typing import Optional, Self

import redis

from redirecthandler.dao.redis.redis_key_schema import RedisKeySchema
from redirecthandler.dao.redis.helpers import connection_label
from redirecthandler.dao.exceptions import DataStoreError
from redirecthandler.utils.config import redis_config, app_prefix


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Redis client and key schema for redirect DAOs

    Attributes:
        redis (redis.Redis): client with decode_responses=True
        keys (RedisKeySchema): namespaced key names of redirects and their indexes

    A PING is sent on construction, so a misconfigured DAO fails right away
    instead of on its first lookup.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis, or adopt redis_client when given

        Port and database may be given as strings (as read from configuration).

        Raises:
            DataStoreError: If Redis doesn't answer the initial PING.
        """
        if redis_client is None:
            # fmt: off
            redis_client = redis.Redis(host=redis_host, port=int(redis_port), db=int(redis_db),
                                       decode_responses=True, username=redis_username, password=redis_password)
            # fmt: on
        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self._healthcheck()

    @classmethod
    def from_config(cls, section: str = 'redirect_store', **kwargs) -> Self:
        """Build a DAO from an AppConfig section, namespaced with app_prefix()

        Raises:
            ConfigurationError: If the section's active backend is not Redis.
            MissingEnvironmentVariableError: If the AppConfig identifiers are not set.
            DataStoreError: If Redis is unreachable.
        """
        dao = cls(**redis_config(section), prefix=app_prefix(), **kwargs)
        logger.debug('Connected redirect store.', extra={'section': section, 'redis': connection_label(dao.redis), 'prefix': dao.keys.prefix})
        return dao

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True on PONG. False if Redis is unreachable and raise_error=False.

        Raises:
            DataStoreError: If Redis is unreachable and raise_error=True.
        """
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if not raise_error:
                logger.warning('Redis healthcheck failed.', extra={'redis': connection_label(self.redis)})
                return False
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}. Check the provided configuration parameters.") from e
        return True
