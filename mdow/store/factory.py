"""Build the store topology of this node from configuration

The backend configuration of a function (see mdow.utils.config.load_config)
decides whether this node is authoritative:

    {'redis': {'host': 'primary.internal', 'port': 6379, 'db': 0}}
        -> this node owns the writable primary (AuthoritativeStore)

    {'redis': {'host': 'replica.internal', 'port': 6379, 'db': 0,
               'primary': {'host': 'primary.internal', 'port': 6379, 'db': 0}}}
        -> this node reads from a local replica (ReplicaStore) and forwards
           mutations to the primary (remote AuthoritativeStore)

Example:
    >>> forwarder = build_forwarder(load_config('create_paste'), load_settings(), prefix=app_prefix())
    >>> forwarder.forwarding
    True
"""

import logging

from mdow.dao.redis import PasteRedisDAO
from mdow.exceptions import BadConfigurationError
from mdow.store.forwarder import WriteForwarder
from mdow.store.paste_store import AuthoritativeStore, ReplicaStore
from mdow.utils.settings import PasteSettings


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ('redis',)


def _redis_kwargs(section: dict) -> dict:
    return {f'redis_{k}': v for k, v in section.items() if k != 'primary'}


def build_forwarder(app_config: dict, settings: PasteSettings, prefix: str | None = None) -> WriteForwarder:
    """Select store implementations for this node and wire them into a WriteForwarder

    Args:
        app_config (dict):
            {<backend>: <backend config>} as returned by load_config().
        settings (PasteSettings):
            Paste store settings.
        prefix (str | None):
            Redis key namespace, e.g. 'mdow:prod'.

    Returns:
        WriteForwarder: forwarder for this node

    Raises:
        BadConfigurationError:
            If the configured backend isn't supported.
        DataStoreUnavailableError:
            If the local Redis node can't be reached.
    """
    backend = next(iter(app_config), None)
    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f'Unsupported paste store backend: {backend!r} (supported: {", ".join(SUPPORTED_BACKENDS)}).')

    redis_config = app_config[backend]
    primary_config = redis_config.get('primary')
    write_options = {'durable_writes': settings.durable_writes, 'fsync_timeout_ms': settings.fsync_timeout_ms}

    if primary_config is None:
        logger.debug('Local Redis node is the authoritative node.')
        dao = PasteRedisDAO(**_redis_kwargs(redis_config), prefix=prefix, **write_options)
        return WriteForwarder(AuthoritativeStore(dao, settings))

    logger.debug(
        'Local Redis node is a read replica, forwarding writes to %s:%s.',
        primary_config.get('host'),
        primary_config.get('port'),
    )
    replica_dao = PasteRedisDAO(**_redis_kwargs(redis_config), prefix=prefix, read_only=True)
    # The primary may be down while this node starts; reads must keep working
    primary_dao = PasteRedisDAO(**_redis_kwargs(primary_config), prefix=prefix, healthcheck=False, **write_options)
    return WriteForwarder(ReplicaStore(replica_dao), authoritative=AuthoritativeStore(primary_dao, settings))
