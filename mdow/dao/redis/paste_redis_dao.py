"""Data Access Object (DAO) implementation for storing pastes in Redis

This module provides a Redis-based implementation of PasteBaseDAO.

Data layout:
    <prefix>:pastes:<paste_id>  (hash)
        content     -> raw markdown
        created_at  -> ISO 8601 UTC timestamp
        expires_at  -> ISO 8601 UTC timestamp
    <prefix>:expiry:pastes      (sorted set)
        member = paste_id, score = expires_at as POSIX timestamp

The sorted set is the expiry index: pruning walks it by score, so a sweep
only touches expired records.

Responsibilities:
    - Insert pastes atomically (hash + expiry index in one MULTI/EXEC);
    - Detect id collisions, including concurrent writers of the same id;
    - Wait for the AOF fsync before acknowledging writes;
    - Refuse mutations through read-only (replica) handles;
    - Translate Redis errors into DAO exceptions.

Classes:
    PasteRedisDAO:
        DAO for storing and retrieving PasteModel in a Redis datastore.

Example:
    >>> from mdow.dao.redis import PasteRedisDAO
    >>> dao = PasteRedisDAO(prefix='mdow:dev')
    >>> dao.insert(paste)
    <PasteRedisDAO>
    >>> dao.get('aB3dE5gH7j').content
    '# Hello'
    >>> dao.prune(before=datetime.now(UTC))
    0
"""

from datetime import datetime

import redis
from beartype import beartype

from mdow.constants import Defaults
from mdow.models import PasteModel
from mdow.dao.base import PasteBaseDAO
from mdow.dao.redis.mixins import RedisClientMixin
from mdow.dao.redis.helpers import handle_redis_errors, describe_connection
from mdow.dao.exceptions import DataStoreError, PasteAlreadyExistsError, PasteNotFoundError, ReadOnlyStoreError


class PasteRedisDAO(RedisClientMixin, PasteBaseDAO):
    """Redis-based Data Access Object (DAO) for pastes

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Attributes:
        read_only (bool):
            If True, insert() and prune() raise ReadOnlyStoreError without
            touching Redis. Used for handles on local read replicas.
        durable_writes (bool):
            If True, every write waits for the AOF fsync (WAITAOF) before returning.
        fsync_timeout_ms (int):
            WAITAOF timeout in milliseconds.

    Example:
        >>> dao = PasteRedisDAO(redis_host='localhost', prefix='mdow:test', durable_writes=False)
        >>> dao.insert(paste).get(paste.paste_id) == paste
        True
    """

    def __init__(
        self,
        *args,
        read_only: bool = False,
        durable_writes: bool = True,
        fsync_timeout_ms: int = Defaults.FSYNC_TIMEOUT_MS,
        **kwargs,
    ):
        self.read_only = read_only
        self.durable_writes = durable_writes
        self.fsync_timeout_ms = fsync_timeout_ms
        super().__init__(*args, **kwargs)

    def __repr__(self) -> str:
        mode = 'read-only' if self.read_only else 'read-write'
        return f'<PasteRedisDAO {describe_connection(self.redis)} ({mode})>'

    @handle_redis_errors
    @beartype
    def insert(self, paste: PasteModel, **kwargs) -> 'PasteRedisDAO':
        """Insert a paste into Redis

        The paste key is WATCHed before the existence check, so a concurrent
        insert of the same id between the check and EXEC aborts the transaction
        and is reported as a collision.

        Args:
            paste (PasteModel):
                Paste to store. Its expires_at must already be computed.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            PasteRedisDAO: self (for method chaining)

        Raises:
            PasteAlreadyExistsError:
                If a paste with the same id already exists.
            ReadOnlyStoreError:
                If this handle is read-only.
            DataStoreError:
                If Redis fails or the write isn't fsynced in time.
            DataStoreUnavailableError:
                If Redis can't be reached.
        """
        self._ensure_writable('insert')

        paste_key = self.keys.paste_key(paste.paste_id)
        expiry_index_key = self.keys.expiry_index_key()

        # NOTE: HSET and ZADD run in one MULTI/EXEC block. Readers (and replicas,
        #       which receive whole transactions) see either the complete record
        #       or nothing; the expiry index never points at a missing hash.
        try:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.watch(paste_key)
                if pipe.exists(paste_key):
                    raise PasteAlreadyExistsError(f"Paste with id '{paste.paste_id}' already exists.")
                pipe.multi()
                # fmt: off
                pipe.hset(paste_key, mapping={
                    'content': paste.content,
                    'created_at': paste.created_at.isoformat(),
                    'expires_at': paste.expires_at.isoformat(),
                })
                # fmt: on
                pipe.zadd(expiry_index_key, {paste.paste_id: paste.expires_at.timestamp()})
                pipe.execute()
        except redis.exceptions.WatchError as e:
            raise PasteAlreadyExistsError(f"Paste with id '{paste.paste_id}' was inserted concurrently.") from e

        self._wait_for_fsync()
        return self

    @handle_redis_errors
    @beartype
    def get(self, paste_id: str, **kwargs) -> PasteModel:
        """Retrieve a stored paste by id

        Liveness is not checked here; expired records still pending pruning
        are returned as is.

        Args:
            paste_id (str):
                Id of the paste.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            PasteModel: the stored paste.

        Raises:
            PasteNotFoundError:
                If the paste does not exist in Redis.
            DataStoreError:
                If the stored record is malformed or Redis fails.
        """
        record = self.redis.hgetall(self.keys.paste_key(paste_id))
        if not record:
            raise PasteNotFoundError(f"Paste with id '{paste_id}' not found.")

        try:
            return PasteModel(
                paste_id=paste_id,
                content=record['content'],
                created_at=datetime.fromisoformat(record['created_at']),
                expires_at=datetime.fromisoformat(record['expires_at']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataStoreError(f"Paste record '{paste_id}' is malformed.") from e

    @handle_redis_errors
    @beartype
    def prune(self, before: datetime, **kwargs) -> int:
        """Delete every paste with expires_at <= before

        Expired ids are read from the expiry index in batches; each batch is
        deleted (hashes and index entries) in one MULTI/EXEC block.

        Args:
            before (datetime):
                Cutoff moment. Pastes expiring at or before it are deleted.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            int: number of deleted pastes.

        Raises:
            ReadOnlyStoreError:
                If this handle is read-only.
            DataStoreError:
                If Redis fails or the deletion isn't fsynced in time.
        """
        self._ensure_writable('prune')

        expiry_index_key = self.keys.expiry_index_key()
        cutoff = before.timestamp()
        batch_size = Defaults.PRUNE_BATCH_SIZE
        removed = 0

        while True:
            expired_ids = self.redis.zrangebyscore(expiry_index_key, '-inf', cutoff, start=0, num=batch_size)
            if not expired_ids:
                break

            with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(*(self.keys.paste_key(paste_id) for paste_id in expired_ids))
                pipe.zrem(expiry_index_key, *expired_ids)
                _, batch_removed = pipe.execute()
            removed += batch_removed

            if len(expired_ids) < batch_size:
                break

        if removed:
            self._wait_for_fsync()
        return removed

    def healthcheck(self) -> bool:
        return self._healthcheck(raise_error=False)

    def _ensure_writable(self, operation: str) -> None:
        if self.read_only:
            raise ReadOnlyStoreError(f"Refusing to {operation} through read-only Redis handle at {describe_connection(self.redis)}.")

    def _wait_for_fsync(self) -> None:
        """Block until the last write is fsynced to the local AOF

        Raises:
            DataStoreError:
                If Redis didn't confirm the fsync within fsync_timeout_ms.
        """
        if not self.durable_writes:
            return

        local_fsyncs, _ = self.redis.execute_command('WAITAOF', 1, 0, self.fsync_timeout_ms)
        if int(local_fsyncs) < 1:
            raise DataStoreError(f'Redis at {describe_connection(self.redis)} did not fsync the write within {self.fsync_timeout_ms}ms.')
