"""Abstract base class for Redirect data access objects (DAOs).

This class establishes a consistent contract for all Redirect DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, PostgreSQL).

Responsibilities:
    - Provide an interface for inserting, updating, retrieving and deleting RedirectModel objects.
    - Enforce the identity contract: (source_uri_path_hash, host) is unique.
    - Enforce optimistic locking: every successful update increments the record version,
      and updates based on a stale version are rejected.
    - Standardize error handling across multiple data store implementations.

Lookups accept un-normalized source paths: '/old/page/' and 'old/page' address
the same redirect.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from redirecthandler.models import RedirectModel
        >>> from redirecthandler.dao.redis import RedirectRedisDAO

        >>> dao = RedirectRedisDAO(...)

        >>> redirect = RedirectModel('/old/page', '/new/page', 301, host='example.com')
        >>> dao.insert(redirect)
        >>> redirect.version
        1

        >>> retrieved = dao.get('/old/page/', host='example.com')
        >>> retrieved.target_uri_path
        'new/page'

        >>> retrieved.update('/newer/page', 308)
        >>> dao.update(retrieved)
        >>> retrieved.version
        2

        >>> dao.hit('old/page', host='example.com')
        1
"""

from abc import ABC, abstractmethod

from redirecthandler.types import Clock
from redirecthandler.models import RedirectModel, RedirectType
from redirecthandler.utils.helpers import utc_now


class RedirectBaseDAO(ABC):
    """Interface for Redirect data access objects (DAOs).

    Methods:
        insert(redirect: RedirectModel) -> RedirectBaseDAO:
            Insert a new RedirectModel into the data store.
            Raises RedirectAlreadyExistsError if the identity is already taken.

        get(source_uri_path: str, host: str | None = None, fallback: bool = True) -> RedirectModel:
            Retrieve a RedirectModel by source path and host.
            Falls back to the global redirect when fallback=True.
            Raises RedirectNotFoundError if the entry does not exist.

        update(redirect: RedirectModel) -> RedirectBaseDAO:
            Persist content changes of a stored RedirectModel and bump its version.
            Raises RedirectConflictError on a version mismatch.

        hit(source_uri_path: str, host: str | None = None) -> int:
            Increment the persisted hit counter. Does not bump the version.

        delete(source_uri_path: str, host: str | None = None) -> RedirectBaseDAO:
            Remove a single RedirectModel.

        find_by_target(target_uri_path: str, host: str | None = None) -> list[RedirectModel]:
            List redirects pointing to a target path.

        find_all(host, only_active, redirect_type) -> list[RedirectModel]:
            List redirects with optional filters.

        hosts() -> list[str]:
            List distinct hosts redirects are scoped to.

        delete_by_host(host: str | None) -> int:
            Remove every redirect of a host.

    All methods raise DataStoreError on connection or read/write failure.

    Subclassing:
        Datastore-specific implementations (e.g., RedirectRedisDAO) must extend
        this class and implement all abstract methods.
    """

    @abstractmethod
    def insert(self, redirect: RedirectModel, **kwargs) -> 'RedirectBaseDAO':
        """Insert a new RedirectModel into the data store.

        On success redirect.version is set to 1.

        Args:
            redirect (RedirectModel):
                The RedirectModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            RedirectBaseDAO: self (for method chaining)

        Raises:
            RedirectAlreadyExistsError:
                If a RedirectModel with the same (source_uri_path_hash, host) already exists.

            InvalidUriPathError:
                If a path does not fit its persisted column.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, source_uri_path: str, host: str | None = None, fallback: bool = True, **kwargs) -> RedirectModel:
        """Retrieve a RedirectModel by its source path and host.

        Args:
            source_uri_path (str):
                Source URI path, normalized before lookup.

            host (str | None):
                Host the redirect is scoped to. None looks up the global redirect.

            fallback (bool):
                If True and no redirect exists for host, return the global redirect instead.

        Returns:
            RedirectModel: The matching redirect.

        Raises:
            RedirectNotFoundError:
                If no matching redirect exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def update(self, redirect: RedirectModel, **kwargs) -> 'RedirectBaseDAO':
        """Persist content changes of an already stored RedirectModel.

        The stored version must equal redirect.version. On success both are incremented.

        Returns:
            RedirectBaseDAO: self (for method chaining)

        Raises:
            RedirectNotFoundError:
                If the redirect is not stored.

            RedirectConflictError:
                If the stored version differs from redirect.version.

            InvalidUriPathError:
                If the target path does not fit its persisted column.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, source_uri_path: str, host: str | None = None, *, clock: Clock = utc_now, **kwargs) -> int:
        """Increment the hit counter of a stored redirect and set its last hit time.

        Returns:
            int: The hit counter after incrementing.

        Raises:
            RedirectNotFoundError:
                If the redirect is not stored.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, source_uri_path: str, host: str | None = None, **kwargs) -> 'RedirectBaseDAO':
        """Remove a stored redirect.

        Raises:
            RedirectNotFoundError:
                If the redirect is not stored.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_target(self, target_uri_path: str, host: str | None = None, **kwargs) -> list[RedirectModel]:
        """Retrieve all redirects with the given target path and host.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_all(
        self,
        host: str | None = None,
        only_active: bool = False,
        redirect_type: RedirectType | None = None,
        *,
        clock: Clock = utc_now,
        **kwargs,
    ) -> list[RedirectModel]:
        """Retrieve all redirects, sorted by host and source path.

        Args:
            host (str | None):
                Only return redirects scoped to this host. None disables the filter.

            only_active (bool):
                Only return redirects whose validity window contains clock().

            redirect_type (RedirectType | None):
                Only return redirects of this type.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hosts(self, **kwargs) -> list[str]:
        """Retrieve the sorted distinct hosts of all host-scoped redirects."""
        pass

    @abstractmethod
    def delete_by_host(self, host: str | None, **kwargs) -> int:
        """Remove every redirect scoped to host (None: global redirects).

        Returns:
            int: Number of removed redirects.
        """
        pass
