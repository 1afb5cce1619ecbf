from redirecthandler.dao.redis.redis_key_schema import RedisKeySchema
from redirecthandler.dao.redis.redirect_redis_dao import RedirectRedisDAO
from redirecthandler.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'RedirectRedisDAO',
    'RedisClientMixin',
]
