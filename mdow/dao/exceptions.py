"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    PasteNotFoundError:
        Raised when a paste doesn't exist or has expired.

    PasteAlreadyExistsError:
        Raised when attempting to insert a paste whose id is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., disk full, OOM, missing fsync, etc.).

    DataStoreUnavailableError:
        Raised when the data store can't be reached (connection refused, timeout).

    ReadOnlyStoreError:
        Raised when a mutation is attempted through a read-only (replica) handle.

Example:
    >>> from mdow.dao.exceptions import PasteNotFoundError
    >>> raise PasteNotFoundError("Paste with id 'aB3dE5gH7j' not found.")
    Traceback (most recent call last):
        ...
    mdow.dao.exceptions.PasteNotFoundError: Paste with id 'aB3dE5gH7j' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class PasteNotFoundError(DAOError):
    """Exception raised when a paste is absent or no longer live."""

    pass


class PasteAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a paste whose id already exists in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. disk full, corruption, OOM, AOF fsync not confirmed, etc.
    """

    pass


class DataStoreUnavailableError(DataStoreError):
    """Exception raised when the data store can't be reached.

    e.g. connection refused, socket timeouts, DNS failures.
    """

    pass


class ReadOnlyStoreError(DAOError):
    """Exception raised when a mutation is attempted on a read-only data store handle."""

    pass
