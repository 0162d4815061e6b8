"""Abstract base class for paste data access objects (DAOs).

This class establishes a consistent contract for all paste DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, SQLite, PostgreSQL).

Responsibilities:
    - Provide an interface for inserting, retrieving and pruning PasteModel records.
    - Standardize error handling across multiple data store implementations.

NOTE:
    - DAOs persist records as given. Generating ids, computing expiry and
      deciding liveness belong to the paste store (mdow.store).

Example:
    Typical usage with a datastore-specific implementation:

        >>> from mdow.models import PasteModel
        >>> from mdow.dao.redis import PasteRedisDAO

        >>> dao = PasteRedisDAO(...)
        >>> dao.insert(paste)

        >>> retrieved = dao.get('aB3dE5gH7j')
        >>> print(retrieved.content)
        # Hello

        >>> dao.prune(before=datetime.now(UTC))
        0
"""

from abc import ABC, abstractmethod
from datetime import datetime

from mdow.models import PasteModel


class PasteBaseDAO(ABC):
    """Interface for paste data access objects (DAOs).

    Methods:
        insert(paste: PasteModel, **kwargs) -> PasteBaseDAO:
            Atomically insert a new paste into the data store.
            Raises PasteAlreadyExistsError if the paste id already exists.
            Raises ReadOnlyStoreError on read-only handles.
            Raises DataStoreError on connection or write failure.

        get(paste_id: str, **kwargs) -> PasteModel:
            Retrieve a paste record by id, live or not.
            Raises PasteNotFoundError if the record does not exist.
            Raises DataStoreError on connection or read failure.

        prune(before: datetime, **kwargs) -> int:
            Delete every record with expires_at <= before.
            Returns the number of deleted records.
            Raises ReadOnlyStoreError on read-only handles.
            Raises DataStoreError on connection or write failure.

    Subclassing:
        Datastore-specific implementations (e.g., PasteRedisDAO) must extend
        this class and implement all abstract methods.
    """

    read_only: bool = False

    @abstractmethod
    def insert(self, paste: PasteModel, **kwargs) -> 'PasteBaseDAO':
        """Insert a new paste into the data store.

        The record must become visible all at once (content, created_at and
        expires_at together) and be durable before this method returns.

        Returns:
            PasteBaseDAO: self (for method chaining)

        Raises:
            PasteAlreadyExistsError:
                If a paste with the same id already exists.
            ReadOnlyStoreError:
                If this handle is read-only.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, paste_id: str, **kwargs) -> PasteModel:
        """Retrieve a paste record by its id.

        Raises:
            PasteNotFoundError:
                If no paste with the given id exists.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def prune(self, before: datetime, **kwargs) -> int:
        """Delete every paste with expires_at <= before.

        Returns:
            int: number of deleted pastes.

        Raises:
            ReadOnlyStoreError:
                If this handle is read-only.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def healthcheck(self) -> bool:
        """Return True if the data store is reachable."""
        pass
