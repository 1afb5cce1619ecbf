from datetime import datetime
from enum import StrEnum
from typing import Any

from redirecthandler.types import Clock
from redirecthandler.exceptions import InvalidStatusCodeError
from redirecthandler.utils.helpers import normalize_uri_path, uri_path_hash, utc_now, as_utc
from redirecthandler.utils.constants import MIN_STATUS_CODE, MAX_STATUS_CODE


class RedirectType(StrEnum):
    """Origin of a redirect: created automatically or by an editor."""

    GENERATED = 'generated'
    MANUAL = 'manual'


def coerce_redirect_type(value: Any) -> RedirectType:
    """Return the matching RedirectType, falling back to GENERATED for anything else."""
    try:
        return RedirectType(value)
    except (ValueError, TypeError):
        return RedirectType.GENERATED


def validate_status_code(status_code: Any) -> int:
    """Coerce a status code to int and check it lies within [100, 599]

    Raises:
        InvalidStatusCodeError: if the value is not integer-like or is out of range.
    """
    try:
        code = int(status_code)
    except (TypeError, ValueError) as e:
        raise InvalidStatusCodeError(f'Status code must be an integer (given: {status_code!r}).') from e

    if not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE:
        raise InvalidStatusCodeError(f'Status code must be within [{MIN_STATUS_CODE}, {MAX_STATUS_CODE}] (given: {code}).')
    return code


class RedirectModel:
    """Represent an HTTP redirect rule.

    A redirect maps a relative source URI path, optionally scoped to a host,
    to a target URI path and the status code sent with the redirect response.
    Both paths are stored without leading or trailing slashes, and each carries
    a hash used as a fixed-width lookup key. The pair (source_uri_path_hash, host)
    identifies a redirect in a data store.

    Content changes (target path, status code) stamp last_modification_date_time.
    Hit tracking only touches hit_counter and last_hit.

    Attributes:
        source_uri_path (str):
            Normalized path that triggers the redirect.
        source_uri_path_hash (str):
            Hash of source_uri_path, part of the identity.
        target_uri_path (str):
            Normalized path the client is redirected to.
        target_uri_path_hash (str):
            Hash of target_uri_path, used to find redirects pointing to a path.
        status_code (int):
            HTTP status code within [100, 599].
        host (Optional[str]):
            Fully qualified host this redirect is scoped to, None for global redirects.
        hit_counter (int):
            Number of times the redirect was matched.
        last_hit (Optional[datetime]):
            Time of the latest match, None until the first one.
        creator (Optional[str]), comment (Optional[str]):
            Human readable audit metadata.
        type (RedirectType):
            generated or manual.
        start_date_time (Optional[datetime]), end_date_time (Optional[datetime]):
            Validity window bounds, None means unbounded on that side.
        creation_date_time (datetime), last_modification_date_time (datetime):
            Audit timestamps.
        version (int):
            Optimistic locking token, managed by the data store. 0 until first persisted.

    Example:
        >>> redirect = RedirectModel('/old', '/new', 301, 'example.com')
        >>> redirect.source_uri_path
        'old'
        >>> redirect.target_uri_path
        'new'
        >>> redirect.hit_counter
        0
        >>> redirect.increment_hit_counter()
        >>> redirect.hit_counter
        1
    """

    def __init__(
        self,
        source_uri_path: str,
        target_uri_path: str,
        status_code: int | str,
        host: str | None = None,
        creator: str | None = None,
        comment: str | None = None,
        type: RedirectType | str | None = None,
        start_date_time: datetime | None = None,
        end_date_time: datetime | None = None,
        *,
        clock: Clock = utc_now,
    ):
        """Create a redirect

        Args:
            source_uri_path (str):
                Relative URI path for which the redirect should be triggered.
            target_uri_path (str):
                Target URI path to which the redirect should point.
            status_code (int | str):
                Status code sent with the redirect header, must be within [100, 599].
            host (Optional[str]):
                Fully qualified host name. Surrounding whitespace is trimmed.
            creator (Optional[str]):
                Human readable name of the creator.
            comment (Optional[str]):
                Textual description of the redirect.
            type (Optional[RedirectType | str]):
                'generated' or 'manual'. Anything else becomes 'generated'.
            start_date_time (Optional[datetime]):
                When the redirect becomes valid. Naive datetimes are read as UTC.
            end_date_time (Optional[datetime]):
                When the redirect expires. Naive datetimes are read as UTC.
            clock (Clock):
                Source of the creation timestamp. Defaults to utc_now.

        Raises:
            InvalidStatusCodeError:
                If status_code is not an integer within [100, 599].
        """
        self._status_code = validate_status_code(status_code)

        self._source_uri_path = normalize_uri_path(source_uri_path)
        self._source_uri_path_hash = uri_path_hash(self._source_uri_path)
        self._assign_target_uri_path(target_uri_path)

        self._host = host.strip() if host else None
        self._creator = creator
        self._comment = comment
        self._type = coerce_redirect_type(type)
        self._start_date_time = as_utc(start_date_time)
        self._end_date_time = as_utc(end_date_time)

        self._hit_counter = 0
        self._last_hit: datetime | None = None

        now = as_utc(clock())
        self._creation_date_time = now
        self._last_modification_date_time = now

        self.version = 0

    @classmethod
    def restore(
        cls,
        *,
        source_uri_path: str,
        target_uri_path: str,
        status_code: int | str,
        host: str | None,
        creator: str | None,
        comment: str | None,
        type: RedirectType | str | None,
        start_date_time: datetime | None,
        end_date_time: datetime | None,
        hit_counter: int,
        last_hit: datetime | None,
        creation_date_time: datetime,
        last_modification_date_time: datetime,
        version: int,
    ) -> 'RedirectModel':
        """Rebuild a persisted redirect without stamping new timestamps

        Paths are normalized and hashes recomputed, so a stored hash can never
        diverge from its path. Naive timestamps are read as UTC.
        """
        # fmt: off
        redirect = cls(source_uri_path, target_uri_path, status_code, host, creator, comment, type,
                       start_date_time, end_date_time, clock=lambda: creation_date_time)
        # fmt: on
        redirect._hit_counter = int(hit_counter)
        redirect._last_hit = as_utc(last_hit)
        redirect._last_modification_date_time = max(as_utc(last_modification_date_time), redirect._creation_date_time)
        redirect.version = int(version)
        return redirect

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}(source_uri_path={self._source_uri_path!r}, '
            f'target_uri_path={self._target_uri_path!r}, status_code={self._status_code}, host={self.host!r})'
        )

    # -------------------------------
    # Mutations
    # -------------------------------

    def update(self, target_uri_path: str, status_code: int | str, *, clock: Clock = utc_now) -> None:
        """Point the redirect to a new target with a new status code

        The status code is validated before anything changes, so a rejected
        update leaves the redirect as it was.

        Raises:
            InvalidStatusCodeError:
                If status_code is not an integer within [100, 599].
        """
        code = validate_status_code(status_code)
        self._assign_target_uri_path(target_uri_path)
        self._status_code = code
        self._touch(clock)

    def set_target_uri_path(self, target_uri_path: str, *, clock: Clock = utc_now) -> None:
        self._assign_target_uri_path(target_uri_path)
        self._touch(clock)

    def set_status_code(self, status_code: int | str, *, clock: Clock = utc_now) -> None:
        """Replace the status code.

        Raises:
            InvalidStatusCodeError:
                If status_code is not an integer within [100, 599].
        """
        self._status_code = validate_status_code(status_code)
        self._touch(clock)

    def increment_hit_counter(self, *, clock: Clock = utc_now) -> None:
        """Record a match of this redirect

        NOTE: hits are telemetry. last_modification_date_time is left untouched.
        """
        self._hit_counter += 1
        self._last_hit = as_utc(clock())

    def is_active(self, at: datetime | None = None, *, clock: Clock = utc_now) -> bool:
        """Check whether `at` (default: now) falls into the validity window

        Both bounds are inclusive and a missing bound is unbounded. A naive `at`
        is read as UTC, like naive bounds.
        """
        at = as_utc(clock() if at is None else at)
        if self._start_date_time is not None and at < self._start_date_time:
            return False
        if self._end_date_time is not None and at > self._end_date_time:
            return False
        return True

    def _assign_target_uri_path(self, target_uri_path: str) -> None:
        self._target_uri_path = normalize_uri_path(target_uri_path)
        self._target_uri_path_hash = uri_path_hash(self._target_uri_path)

    def _touch(self, clock: Clock) -> None:
        # last_modification_date_time >= creation_date_time, even if the clock goes backwards
        self._last_modification_date_time = max(as_utc(clock()), self._creation_date_time)

    # -------------------------------
    # Accessors
    # -------------------------------

    @property
    def identity(self) -> tuple[str, str | None]:
        """(source_uri_path_hash, host): the unique key of a redirect in a data store."""
        return self._source_uri_path_hash, self.host

    @property
    def source_uri_path(self) -> str:
        return self._source_uri_path

    @property
    def source_uri_path_hash(self) -> str:
        return self._source_uri_path_hash

    @property
    def target_uri_path(self) -> str:
        return self._target_uri_path

    @property
    def target_uri_path_hash(self) -> str:
        return self._target_uri_path_hash

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def host(self) -> str | None:
        # Blank hosts are stored as given but read as global
        if self._host is None or self._host.strip() == '':
            return None
        return self._host

    @property
    def hit_counter(self) -> int:
        return self._hit_counter

    @property
    def last_hit(self) -> datetime | None:
        return self._last_hit

    @property
    def creator(self) -> str | None:
        return self._creator

    @property
    def comment(self) -> str | None:
        return self._comment

    @property
    def type(self) -> RedirectType:
        return self._type

    @property
    def start_date_time(self) -> datetime | None:
        return self._start_date_time

    @property
    def end_date_time(self) -> datetime | None:
        return self._end_date_time

    @property
    def creation_date_time(self) -> datetime:
        return self._creation_date_time

    @property
    def last_modification_date_time(self) -> datetime:
        return self._last_modification_date_time
