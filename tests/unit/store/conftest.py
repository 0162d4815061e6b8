import fakeredis
import pytest

from mdow.dao.redis import PasteRedisDAO
from mdow.utils.settings import PasteSettings


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def settings() -> PasteSettings:
    # fakeredis has no AOF, so writes are acknowledged without WAITAOF
    return PasteSettings(durable_writes=False)


@pytest.fixture
def primary_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture
def replica_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture
def primary_redis(primary_server) -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=primary_server, decode_responses=True)


@pytest.fixture
def replica_redis(replica_server) -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=replica_server, decode_responses=True)


@pytest.fixture
def primary_dao(primary_redis, app_prefix, settings) -> PasteRedisDAO:
    return PasteRedisDAO(redis_client=primary_redis, prefix=app_prefix, durable_writes=settings.durable_writes)


@pytest.fixture
def replica_dao(replica_redis, app_prefix) -> PasteRedisDAO:
    return PasteRedisDAO(redis_client=replica_redis, prefix=app_prefix, read_only=True)


@pytest.fixture
def replicate(primary_redis, replica_redis):
    """Copy every committed key from the primary to the replica (one replication round)."""

    def _replicate() -> None:
        replica_redis.flushdb()
        for key in primary_redis.keys('*'):
            if primary_redis.type(key) == 'hash':
                replica_redis.hset(key, mapping=primary_redis.hgetall(key))
            else:
                replica_redis.zadd(key, dict(primary_redis.zrange(key, 0, -1, withscores=True)))

    return _replicate
