"""Paste stores: id generation, liveness and pruning on top of a paste DAO

Classes:
    PasteStore:
        Interface shared by every store node.
    AuthoritativeStore:
        The single store allowed to mutate. Generates ids, retries on
        collision, stamps expiry, prunes, and halts writes after storage
        failures until resumed.
    ReplicaStore:
        Read-only store on top of a local replica. Mutations are refused;
        they must go through the WriteForwarder to the authoritative store.

Example:
    >>> store = AuthoritativeStore(PasteRedisDAO(prefix='mdow:dev'), PasteSettings())
    >>> paste = store.insert('# Hello')
    >>> store.fetch(paste.paste_id).content
    '# Hello'
    >>> store.prune_expired()
    0
"""

import logging
import threading
import contextlib
from abc import ABC, abstractmethod
from datetime import datetime, UTC
from collections.abc import Iterator

from mdow.models import PasteModel
from mdow.types import IdGenerator
from mdow.dao.base import PasteBaseDAO
from mdow.dao.exceptions import (
    DataStoreError,
    DataStoreUnavailableError,
    PasteAlreadyExistsError,
    PasteNotFoundError,
    ReadOnlyStoreError,
)
from mdow.exceptions import IdCollisionExhaustedError, WritesHaltedError
from mdow.utils.idgen import generate_paste_id
from mdow.utils.expiry import compute_expires_at, is_live
from mdow.utils.settings import PasteSettings


logger = logging.getLogger(__name__)


class PasteStore(ABC):
    """Interface for paste store nodes.

    Methods:
        insert(content: str) -> PasteModel:
            Store new content under a fresh id.
        fetch(paste_id: str) -> PasteModel:
            Return a live paste. Raises PasteNotFoundError if absent or expired.
        prune_expired() -> int:
            Delete every expired paste, returning how many were deleted.
    """

    is_authoritative: bool = False

    def __init__(self, dao: PasteBaseDAO):
        self.dao = dao

    @abstractmethod
    def insert(self, content: str) -> PasteModel:
        pass

    def fetch(self, paste_id: str) -> PasteModel:
        """Return the paste only if it exists and is live

        Expired pastes still waiting for a sweep are reported as not found.

        Raises:
            PasteNotFoundError:
                If the paste doesn't exist or has expired.
            DataStoreError:
                If the data store fails.
        """
        paste = self.dao.get(paste_id)
        if not is_live(paste.expires_at, now=datetime.now(UTC)):
            raise PasteNotFoundError(f"Paste with id '{paste_id}' has expired.")
        return paste

    @abstractmethod
    def prune_expired(self) -> int:
        pass

    def healthcheck(self) -> bool:
        return self.dao.healthcheck()


class AuthoritativeStore(PasteStore):
    """Store node owning the writable handle.

    Attributes:
        dao (PasteBaseDAO):
            Writable paste DAO.
        settings (PasteSettings):
            Retention window, id space and insert attempt limit.
        id_generator (IdGenerator):
            (length, alphabet) -> paste id. Defaults to generate_paste_id.
    """

    is_authoritative = True

    def __init__(self, dao: PasteBaseDAO, settings: PasteSettings, id_generator: IdGenerator = generate_paste_id):
        if dao.read_only:
            raise ReadOnlyStoreError('The authoritative store needs a writable paste DAO.')
        super().__init__(dao)
        self.settings = settings
        self.id_generator = id_generator
        self._halted: DataStoreError | None = None
        self._halted_at: datetime | None = None
        self._halt_lock = threading.Lock()

    @property
    def writes_halted(self) -> bool:
        return self._halted is not None

    def insert(self, content: str) -> PasteModel:
        """Store `content` under a freshly generated id

        A taken id is retried with a new one, up to settings.max_insert_attempts
        ids in total.

        Args:
            content (str): raw markdown

        Returns:
            PasteModel: the stored paste

        Raises:
            IdCollisionExhaustedError:
                If every attempted id was already taken.
            WritesHaltedError:
                If writes were halted by an earlier storage failure.
            DataStoreUnavailableError:
                If the data store can't be reached.
            DataStoreError:
                If the data store fails (writes are halted afterwards).
        """
        self._ensure_accepting_writes()

        created_at = datetime.now(UTC)
        expires_at = compute_expires_at(created_at, self.settings.retention)

        for attempt in range(1, self.settings.max_insert_attempts + 1):
            paste = PasteModel(
                paste_id=self.id_generator(self.settings.id_length, self.settings.id_alphabet),
                content=content,
                created_at=created_at,
                expires_at=expires_at,
            )
            try:
                with self._halt_on_storage_failure():
                    self.dao.insert(paste)
            except PasteAlreadyExistsError:
                logger.warning(
                    'Paste id collision, retrying with a new id.',
                    extra={'event': 'PASTE_ID_COLLISION', 'paste_id': paste.paste_id, 'attempt': attempt},
                )
                continue
            return paste

        logger.critical(
            'Exhausted paste id attempts. The id space is likely misconfigured.',
            extra={
                'event': 'PASTE_ID_COLLISION_EXHAUSTED',
                'attempts': self.settings.max_insert_attempts,
                'id_length': self.settings.id_length,
                'alphabet_size': len(self.settings.id_alphabet),
            },
        )
        raise IdCollisionExhaustedError(f'Every one of {self.settings.max_insert_attempts} generated paste ids was already taken.')

    def prune_expired(self) -> int:
        """Delete every paste with expires_at <= now

        Pruning is allowed while inserts are halted: it only reclaims space.

        Returns:
            int: number of deleted pastes (0 when nothing was expired).
        """
        now = datetime.now(UTC)
        with self._halt_on_storage_failure():
            removed = self.dao.prune(before=now)
        logger.debug('Pruned expired pastes.', extra={'removed': removed, 'cutoff': now.isoformat()})
        return removed

    def resume_writes(self) -> bool:
        """Accept writes again after a storage failure was resolved

        Called by operators, and by insert() itself once a halt has held for
        settings.halt_recheck_interval. If the storage failure persists, the
        next insert fails and halts writes again.

        Returns:
            bool: True if the data store answered the healthcheck and writes resumed.
        """
        if not self.dao.healthcheck():
            logger.warning('Data store still unhealthy, writes stay halted.', extra={'event': 'WRITES_HALTED'})
            return False
        with self._halt_lock:
            self._halted = None
            self._halted_at = None
        logger.info('Writes resumed.', extra={'event': 'WRITES_RESUMED'})
        return True

    def _ensure_accepting_writes(self) -> None:
        with self._halt_lock:
            halted, halted_at = self._halted, self._halted_at
        if halted is None:
            return

        now = datetime.now(UTC)
        if now - halted_at >= self.settings.halt_recheck_interval:
            if self.resume_writes():
                return
            with self._halt_lock:
                self._halted_at = now
        raise WritesHaltedError(f'Writes are halted after a storage failure: {halted}')

    @contextlib.contextmanager
    def _halt_on_storage_failure(self) -> Iterator[None]:
        # Connectivity failures don't halt writes: the node may only be unreachable for a moment
        try:
            yield
        except DataStoreUnavailableError:
            raise
        except DataStoreError as error:
            self._halt(error)
            raise

    def _halt(self, error: DataStoreError) -> None:
        with self._halt_lock:
            self._halted = error
            self._halted_at = datetime.now(UTC)
        logger.critical(
            'Storage failure on the authoritative store. Halting writes.',
            extra={'event': 'WRITES_HALTED', 'reason': str(error), 'error': error.__class__.__name__},
        )


class ReplicaStore(PasteStore):
    """Store node on top of a read-only local replica.

    Only fetch() is served locally. A replica may briefly report a paste that
    was just created on the authoritative node as not found (replication lag).
    """

    is_authoritative = False

    def __init__(self, dao: PasteBaseDAO):
        if not dao.read_only:
            raise ReadOnlyStoreError('A replica store needs a read-only paste DAO.')
        super().__init__(dao)

    def insert(self, content: str) -> PasteModel:
        raise ReadOnlyStoreError('Replica stores never insert. Route inserts through the WriteForwarder.')

    def prune_expired(self) -> int:
        raise ReadOnlyStoreError('Replica stores never prune. Route pruning through the WriteForwarder.')
