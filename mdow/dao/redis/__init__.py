from mdow.dao.redis.redis_key_schema import RedisKeySchema
from mdow.dao.redis.mixins import RedisClientMixin
from mdow.dao.redis.paste_redis_dao import PasteRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'PasteRedisDAO',
]
