"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    RedirectNotFoundError:
        Raised when a RedirectModel is not found in the data store.

    RedirectAlreadyExistsError:
        Raised when inserting a RedirectModel whose (source path hash, host)
        identity is already taken.

    RedirectConflictError:
        Raised when an update is based on a stale record version.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from redirecthandler.dao.exceptions import RedirectNotFoundError
    >>> raise RedirectNotFoundError("Redirect for 'old/page' (host: example.com) not found.")
    Traceback (most recent call last):
        ...
    redirecthandler.dao.exceptions.RedirectNotFoundError: Redirect for 'old/page' (host: example.com) not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class RedirectNotFoundError(DAOError):
    """Exception raised when a RedirectModel is not found in the data store."""

    pass


class RedirectAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a RedirectModel that already exists in the data store."""

    pass


class RedirectConflictError(DAOError):
    """Exception raised when a RedirectModel was modified concurrently.

    The persisted version no longer matches the version the caller read,
    so the write is rejected instead of overwriting the other change.
    """

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
