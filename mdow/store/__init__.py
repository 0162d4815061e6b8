from mdow.store.paste_store import PasteStore, AuthoritativeStore, ReplicaStore
from mdow.store.forwarder import Operation, WriteForwarder
from mdow.store.factory import build_forwarder


__all__ = [
    'PasteStore',
    'AuthoritativeStore',
    'ReplicaStore',
    'Operation',
    'WriteForwarder',
    'build_forwarder',
]
