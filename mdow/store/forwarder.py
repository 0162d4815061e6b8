"""Write forwarding between store nodes

One authoritative node accepts mutations; any number of read replicas receive
its committed writes asynchronously. The WriteForwarder sends every mutation
(insert, prune) to the authoritative store and serves reads from the local
store.

Consistency:
    - A replica may report a paste created moments ago on the authoritative
      node as not found until replication catches up. This is accepted,
      bounded staleness.
    - A replica never returns content the authoritative node hasn't
      committed: replicas only receive complete MULTI/EXEC blocks.
    - If the authoritative node is unreachable, mutations fail with
      AuthoritativeNodeUnavailableError. They are never written locally.

Classes:
    Operation:
        Kinds of store operations (insert, fetch, prune_expired).
    WriteForwarder:
        Routes operations to the local or the authoritative store.

Example:
    >>> forwarder = WriteForwarder(ReplicaStore(replica_dao), authoritative=AuthoritativeStore(primary_dao, settings))
    >>> forwarder.route(Operation.INSERT).is_authoritative
    True
    >>> paste = forwarder.insert('# Hello')  # executed on the primary
    >>> forwarder.fetch(paste.paste_id)      # served by the local replica
"""

import logging
from enum import StrEnum
from collections.abc import Callable
from typing import TypeVar

from mdow.models import PasteModel
from mdow.store.paste_store import PasteStore
from mdow.dao.exceptions import DataStoreUnavailableError
from mdow.exceptions import AuthoritativeNodeUnavailableError, BadConfigurationError


logger = logging.getLogger(__name__)

T = TypeVar('T')


class Operation(StrEnum):
    INSERT = 'insert'
    FETCH = 'fetch'
    PRUNE_EXPIRED = 'prune_expired'


MUTATING_OPERATIONS = frozenset({Operation.INSERT, Operation.PRUNE_EXPIRED})


class WriteForwarder:
    """Route store operations to the node allowed to execute them.

    Attributes:
        local (PasteStore):
            Store of this node (authoritative or replica).
        authoritative (PasteStore):
            The authoritative store. Same object as `local` on the authoritative node.

    Methods:
        route(operation: Operation) -> PasteStore:
            Mutations resolve to the authoritative store, reads to the local store.
        insert(content: str) -> PasteModel
        fetch(paste_id: str) -> PasteModel
        prune_expired() -> int
    """

    def __init__(self, local: PasteStore, authoritative: PasteStore | None = None):
        """Wire the local store to the authoritative store

        Args:
            local (PasteStore):
                Store of this node.
            authoritative (PasteStore | None):
                Store of the authoritative node. Omit on the authoritative node itself.

        Raises:
            BadConfigurationError:
                If no authoritative store is available, or if a replica is given as authoritative.
        """
        if authoritative is None:
            authoritative = local
        if not authoritative.is_authoritative:
            raise BadConfigurationError('Write forwarding needs an authoritative store; only replicas were configured.')

        self.local = local
        self.authoritative = authoritative

    @property
    def forwarding(self) -> bool:
        """True if mutations leave this node"""
        return self.authoritative is not self.local

    def route(self, operation: Operation) -> PasteStore:
        if Operation(operation) in MUTATING_OPERATIONS:
            return self.authoritative
        return self.local

    def insert(self, content: str) -> PasteModel:
        """Create a paste on the authoritative node

        Raises:
            AuthoritativeNodeUnavailableError:
                If this node forwards and the authoritative node can't be reached.
            IdCollisionExhaustedError, WritesHaltedError, DataStoreError:
                Propagated unchanged from the authoritative store.
        """
        return self._dispatch(Operation.INSERT, lambda store: store.insert(content))

    def fetch(self, paste_id: str) -> PasteModel:
        """Read a live paste from the local node

        Raises:
            PasteNotFoundError:
                If the paste doesn't exist, has expired, or hasn't replicated yet.
        """
        return self._dispatch(Operation.FETCH, lambda store: store.fetch(paste_id))

    def prune_expired(self) -> int:
        """Delete expired pastes on the authoritative node

        Raises:
            AuthoritativeNodeUnavailableError:
                If this node forwards and the authoritative node can't be reached.
        """
        return self._dispatch(Operation.PRUNE_EXPIRED, lambda store: store.prune_expired())

    def _dispatch(self, operation: Operation, call: Callable[[PasteStore], T]) -> T:
        target = self.route(operation)
        if target is self.local:
            return call(target)

        logger.debug('Forwarding %s to the authoritative node.', operation, extra={'event': 'FORWARDED_WRITE', 'operation': str(operation)})
        try:
            return call(target)
        except DataStoreUnavailableError as e:
            logger.error(
                'Authoritative node unreachable, %s not executed.',
                operation,
                extra={'event': 'AUTHORITATIVE_UNAVAILABLE', 'operation': str(operation), 'reason': str(e)},
            )
            raise AuthoritativeNodeUnavailableError(f"Can't {operation} pastes: the authoritative node is unavailable.") from e
