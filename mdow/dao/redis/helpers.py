import functools
import redis

from mdow.dao.exceptions import DataStoreError, DataStoreUnavailableError


__all__ = []


def describe_connection(client: redis.Redis) -> str:
    """Return '<host>:<port>/<db>' for a Redis client"""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_errors[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate Redis errors into DAO errors

    Connectivity problems (connection refused, socket timeouts) become
    DataStoreUnavailableError. Every other server-side failure (OOM, MISCONF,
    READONLY, ...) becomes DataStoreError.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError (or DataStoreUnavailableError) instead.

    Example:
        >>> @handle_redis_errors
        ... def count(self):
        ...     return self.redis.zcard('expiry:pastes')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreUnavailableError(f"Can't connect to Redis at {describe_connection(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis at {describe_connection(self.redis)} failed: {e}') from e

    return wrapper
